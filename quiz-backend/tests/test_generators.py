import random
import re

from generation.multi_select import _recombinations, build_msq, generate_msqs
from generation.question_generator import (
    build_single_choice,
    exam_topic,
    factual_prompt,
    generate_comparison_mcqs,
    generate_definition_mcqs,
    generate_exam_mcqs,
    generate_factual_mcqs,
)
from generation.schemas import TRUE_FALSE_OPTIONS
from generation.true_false import build_true_false, generate_true_false
from parsing.fact_extractor import Fact, extract_facts
from parsing.patterns import SUBJECT_VERB_COMPLEMENT, normalize_key
from parsing.segmenter import Chunk, segment_text
from parsing.text_metrics import similarity

DEFINITIONS = [
    "Paris is the capital of France.",
    "Photosynthesis is the process plants use for food.",
    "A volcano is an opening in the crust of Earth.",
    "Mitochondria are organelles that make energy.",
    "Gravity is the force that pulls objects together.",
]


def _definition_inputs():
    chunks = [Chunk(" ".join(DEFINITIONS), 0)]
    facts = [Fact(text, "definition", 0) for text in DEFINITIONS]
    return chunks, facts


def _assert_single_choice(question):
    assert question.type == "single"
    assert len(question.options) == 4
    assert 0 <= question.answer < 4
    assert len({normalize_key(o) for o in question.options}) == 4


def test_definition_mcq_for_paris(rng):
    chunks, facts = _definition_inputs()
    questions = generate_definition_mcqs(chunks, facts, "medium", rng)
    paris = next(q for q in questions if q.prompt == "What is the best definition of Paris?")
    _assert_single_choice(paris)

    correct = paris.options[paris.answer]
    assert correct == "Paris is the capital of France"
    distractors = [o for i, o in enumerate(paris.options) if i != paris.answer]
    assert len(distractors) == 3
    for i, d in enumerate(distractors):
        assert similarity(d, correct) < 0.7
        for other in distractors[i + 1:]:
            assert similarity(d, other) < 0.7


def test_definition_distractors_never_mention_the_subject(rng):
    chunks, facts = _definition_inputs()
    for question in generate_definition_mcqs(chunks, facts, "easy", rng):
        subject = question.prompt[len("What is the best definition of "):-1].lower()
        wrong = [o for i, o in enumerate(question.options) if i != question.answer]
        assert all(subject not in o.lower() for o in wrong)


def test_msq_from_enumeration(rng):
    sentence = "The system includes caching, indexing, and compaction."
    question = build_msq(sentence, [Chunk(sentence, 0)], "medium", rng)
    assert question.type == "multiple"
    assert len(question.options) == 4
    assert question.prompt == "What does the system include? Select all that apply."

    listed = {"caching", "indexing", "compaction"}
    chosen = {question.options[i].lower() for i in question.answer}
    assert 1 <= len(question.answer) <= 3
    assert chosen <= listed
    unchosen = {o.lower() for i, o in enumerate(question.options) if i not in question.answer}
    assert not unchosen & listed


def test_msq_answer_matches_sampled_subset_across_seeds():
    sentence = "The system includes caching, indexing, and compaction."
    sizes = set()
    for seed in range(30):
        question = build_msq(sentence, [Chunk(sentence, 0)], "medium", random.Random(seed))
        sizes.add(len(question.answer))
        assert question.answer == sorted(question.answer)
    assert sizes == {1, 2, 3}


def test_recombinations_keep_item_case():
    combos = _recombinations(["Mercury", "the Moon", "caching"], random.Random(0))
    assert len(combos) == 6
    for combo in combos:
        assert combo.split(" ", 1)[1] in {"Mercury", "Moon", "caching"}


def test_msq_needs_two_items(rng):
    assert build_msq("The kit includes a hammer.", [], "easy", rng) is None


def test_generate_msqs_skips_sentences_without_list_cue(rng, solar_text):
    chunks = segment_text(solar_text)
    questions = generate_msqs(chunks, extract_facts(chunks), "medium", rng)
    assert questions
    assert all(q.source == "msq" and q.type == "multiple" for q in questions)
    assert all(q.prompt.endswith("Select all that apply.") for q in questions)


def test_true_false_options_and_answer(rng):
    fact = Fact("Oxygen is required for aerobic respiration in animal cells.", "definition", 0)
    seen = set()
    for _ in range(20):
        question = build_true_false(fact, "easy", rng)
        assert question.options == TRUE_FALSE_OPTIONS
        if question.answer == 0:
            assert normalize_key(question.prompt) == normalize_key(fact.text)
        else:
            assert normalize_key(question.prompt) != normalize_key(fact.text)
        seen.add(question.answer)
    assert seen == {0, 1}


def test_generate_true_false_respects_count(rng, solar_text):
    chunks = segment_text(solar_text)
    questions = generate_true_false(chunks, extract_facts(chunks), "easy", rng)
    assert len(questions) == 3
    assert all(q.source == "true_false" for q in questions)


def test_factual_prompts_by_difficulty():
    match = SUBJECT_VERB_COMPLEMENT.match("The Moon is the only natural satellite of Earth.")
    assert factual_prompt(match, "easy") == "What is the Moon?"
    assert factual_prompt(match, "medium") == "Which statement about the Moon is correct?"
    assert factual_prompt(match, "hard") == "Which analysis of the Moon is most accurate?"


def test_factual_mcqs_are_well_formed(rng, solar_text):
    chunks = segment_text(solar_text)
    questions = generate_factual_mcqs(chunks, extract_facts(chunks), "medium", rng)
    assert 0 < len(questions) <= 8
    for question in questions:
        _assert_single_choice(question)
        assert question.source == "factual"


def test_exam_mcqs_use_difficulty_templates(rng, solar_text):
    chunks = segment_text(solar_text)
    questions = generate_exam_mcqs(chunks, extract_facts(chunks), "hard", rng)
    assert questions
    for question in questions:
        _assert_single_choice(question)
        assert question.difficulty == "hard"


def test_exam_topic_keeps_article():
    assert exam_topic("The Sun is a star that contains most of the mass.") == "the Sun"
    assert exam_topic("Meteorites are fragments of rock that survive the fall.") == "Meteorites"


def test_exam_prompts_agree_with_topic(rng, solar_text):
    chunks = segment_text(solar_text)
    questions = generate_exam_mcqs(chunks, extract_facts(chunks), "medium", rng)
    assert questions
    for question in questions:
        assert not re.search(r"\bis (Meteorites|Comets|Tides)\b", question.prompt)
        assert not re.search(r"\b(describes|about) Sun\b", question.prompt)


def test_comparison_mcq(rng):
    sentences = [
        "Diesel engines are more efficient compared to petrol engines.",
        "Electric cars are less noisy compared to petrol cars.",
    ]
    chunks = [Chunk(" ".join(sentences), 0)]
    questions = generate_comparison_mcqs(chunks, [], "medium", rng)
    assert len(questions) == 2
    diesel = questions[0]
    _assert_single_choice(diesel)
    assert diesel.prompt.startswith("Which statement correctly compares Diesel engines and")
    assert diesel.options[diesel.answer].startswith("Diesel engines are more efficient")


def test_single_choice_keeps_correct_answer_reachable(rng):
    question = build_single_choice(
        "What is xylem?", "A tissue that carries water", ["Caching", "Caching"], "easy", "factual", rng, "xylem"
    )
    _assert_single_choice(question)
    assert question.options[question.answer] == "A tissue that carries water"


def test_single_choice_rejects_empty_answer(rng):
    assert build_single_choice("What is xylem?", " . ", ["A", "B", "C"], "easy", "factual", rng) is None

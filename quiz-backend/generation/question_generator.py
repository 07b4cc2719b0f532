"""
Single-answer question generators.

  - Factual-MCQ     → "What is X?" / "Which statement about X is correct?" / "Which analysis of X ..."
  - Definition-MCQ  → "What is the best definition of X?"
  - Comparison-MCQ  → supplementary; only used when the other generators come up short
  - Exam-style MCQ  → quality-ranked facts with difficulty-dependent templates

Every generator takes read-only (chunks, facts, difficulty, rng) and returns a
fresh List[QuestionCandidate]. Distractors come from generation.distractors and
options are assembled through OptionSet.
"""

from collections import Counter
from typing import List, Optional, Tuple
import random
import re

from generation.config import (
    ANSWER_MATCH_SIMILARITY,
    DEFINITION_DISTRACTOR_SIMILARITY,
    DISTRACTOR_SIMILARITY,
    KEY_PHRASE_OVERLAP,
    generator_count,
)
from generation.distractors import distractor_count, infer_subject, pick_distractors, synthesize
from generation.options import OptionSet, format_option, format_question, short_subject
from generation.schemas import QuestionCandidate
from parsing.fact_extractor import Fact, FactExtractor
from parsing.patterns import (
    COMPARISON,
    DEFINITION,
    MONTHS,
    SUBJECT_VERB_COMPLEMENT,
    RuleMatch,
    has_number,
    lower_first,
    normalize_key,
    split_sentences,
    strip_article,
    strip_terminal,
    verb_forms,
)
from parsing.segmenter import Chunk
from parsing.text_metrics import key_phrase_overlap, similarity

MAX_SUBJECT_REPEATS = 3
HIGH_FREQUENCY_SUBJECT = 3
COMPLEMENT_MIN_CHARS = 8

EXAM_TEMPLATES = {
    "easy": [
        "Which statement about {topic} is true?",
        "What does the material state about {topic}?",
        "Which fact about {topic} is correct?",
    ],
    "medium": [
        "Which statement best describes {topic}?",
        "How {be} {topic} characterized in the material?",
        "What is a key point about {topic}?",
    ],
    "hard": [
        "Which conclusion about {topic} is best supported?",
        "Which claim about {topic} would an expert accept?",
        "What is the most accurate interpretation of {topic}?",
    ],
}

CAUSAL_WORDS = ("because", "therefore", "causes", "leads to", "results in", "due to", "as a result")
DEFINITIONAL_WORDS = ("is defined as", "refers to", "means", " is a ", " is an ", " are ")
ORDERING_WORDS = ("first", "second", "then", "finally", "before", "after", "stage", "step")
CONTRAST_WORDS = ("however", "whereas", "but", "unlike", "although", "in contrast")


# ─── Shared helpers ───────────────────────────────────────────────────────────

def _fact_pool(facts: List[Fact]) -> List[str]:
    return [f.text for f in facts]


def _chunk_sentences(chunks: List[Chunk]) -> List[str]:
    return [s for chunk in chunks for s in split_sentences(chunk.text)]


def _unique(sentences: List[str]) -> List[str]:
    seen = set()
    out = []
    for s in sentences:
        key = normalize_key(s)
        if key and key not in seen:
            seen.add(key)
            out.append(s)
    return out


def _locate_answer(options: List[str], correct: str, rng: random.Random) -> Tuple[List[str], int]:
    """
    Find the correct answer after shuffling.

    Exact match → key-phrase overlap ≥ 70% → best similarity > 0.7.
    When nothing matches, a random slot is overwritten with the correct answer.
    """
    key = normalize_key(correct)
    for i, option in enumerate(options):
        if normalize_key(option) == key:
            return options, i
    for i, option in enumerate(options):
        if key_phrase_overlap(correct, option) >= KEY_PHRASE_OVERLAP:
            return options, i
    scores = [similarity(correct, option) for option in options]
    best = max(range(len(options)), key=lambda i: scores[i])
    if scores[best] > ANSWER_MATCH_SIMILARITY:
        return options, best
    slot = rng.randrange(len(options))
    options = list(options)
    options[slot] = correct
    return options, slot


def build_single_choice(
    prompt: str,
    correct: str,
    distractors: List[str],
    difficulty: str,
    source: str,
    rng: random.Random,
    subject: str = "",
) -> Optional[QuestionCandidate]:
    """Assemble a 4-option single-answer candidate with the correct answer shuffled in."""
    if not format_option(correct):
        return None
    option_set = OptionSet([correct] + list(distractors), subject=subject).normalize().dedupe().pad_to_count(4)
    correct_text = option_set.options[0]
    option_set.shuffle(rng)
    options, answer = _locate_answer(option_set.options, correct_text, rng)
    return QuestionCandidate(
        prompt=format_question(prompt),
        options=options,
        answer=answer,
        type="single",
        difficulty=difficulty,
        source=source,
    )


# ─── Factual MCQ ──────────────────────────────────────────────────────────────

def fact_quality(text: str) -> int:
    """Favour specific details (numbers, dates, proper names) and mid-length sentences."""
    score = 0
    low = text.lower()
    if has_number(text):
        score += 2
    if any(re.search(rf"\b{m}\b", low) for m in MONTHS) or re.search(r"\b1[0-9]{3}\b|\b20[0-9]{2}\b", text):
        score += 2
    capitals = [w for w in re.findall(r"[A-Za-z]+", text)[1:] if w[0].isupper()]
    score += min(len(capitals), 3)
    if 60 <= len(text) <= 150:
        score += 2
    elif len(text) > 200:
        score -= 1
    return score


def _verb_question(match: RuleMatch) -> str:
    """Direct 'what' question that the complement answers."""
    subject = lower_first(match.subject)
    pred = match.predicate.lower()
    if pred in ("is", "are", "was", "were"):
        return f"What {pred} {subject}?"
    if pred in ("can", "will"):
        return f"What {pred} {subject} do?"
    if pred in ("has", "have", "had"):
        aux = {"has": "does", "have": "do", "had": "did"}[pred]
        return f"What {aux} {subject} have?"
    words = pred.split()
    head = words[0]
    if head.endswith("s") and not head.endswith("ss"):
        base = head[:-2] if head.endswith(("shes", "ches", "sses")) else head[:-1]
        return f"What does {subject} {' '.join([base] + words[1:])}?"
    return f"What do {subject} {pred}?"


def factual_prompt(match: RuleMatch, difficulty: str) -> str:
    if difficulty == "easy":
        return _verb_question(match)
    topic = lower_first(match.subject)
    if difficulty == "hard":
        return f"Which analysis of {topic} is most accurate?"
    return f"Which statement about {topic} is correct?"


def generate_factual_mcqs(
    chunks: List[Chunk], facts: List[Fact], difficulty: str, rng: random.Random
) -> List[QuestionCandidate]:
    target = generator_count("factual", difficulty)
    pool = _fact_pool(facts)
    ranked = sorted(facts, key=lambda f: fact_quality(f.text), reverse=True)

    matches = []
    for fact in ranked:
        match = SUBJECT_VERB_COMPLEMENT.match(fact.text)
        if match and len(match.object) >= COMPLEMENT_MIN_CHARS:
            matches.append(match)
    frequency = Counter(normalize_key(strip_article(m.subject)) for m in matches)

    processed: Counter = Counter()
    questions: List[QuestionCandidate] = []
    for match in matches:
        if len(questions) >= target:
            break
        key = normalize_key(strip_article(match.subject))
        limit = MAX_SUBJECT_REPEATS if frequency[key] >= HIGH_FREQUENCY_SUBJECT else 1
        if processed[key] >= limit:
            continue
        candidates = synthesize(match.object, pool, rng, distractor_count(difficulty), subject=match.subject)
        distractors = pick_distractors(match.object, candidates, difficulty)
        question = build_single_choice(
            factual_prompt(match, difficulty), match.object, distractors, difficulty, "factual", rng, match.subject
        )
        if question:
            processed[key] += 1
            questions.append(question)
    return questions


# ─── Definition MCQ ───────────────────────────────────────────────────────────

def generate_definition_mcqs(
    chunks: List[Chunk], facts: List[Fact], difficulty: str, rng: random.Random
) -> List[QuestionCandidate]:
    target = generator_count("definition", difficulty)
    sentences = _unique(_chunk_sentences(chunks) + [f.text for f in facts if f.kind == "definition"])
    definitions = [m for m in (DEFINITION.match(s) for s in sentences) if m]
    pool = _fact_pool(facts)

    questions: List[QuestionCandidate] = []
    for match in definitions:
        if len(questions) >= target:
            break
        subject = strip_article(match.subject)
        correct = strip_terminal(match.sentence)
        others = [
            strip_terminal(d.sentence)
            for d in definitions
            if d is not match
            and subject.lower() not in d.sentence.lower()
            and similarity(d.sentence, correct) < DEFINITION_DISTRACTOR_SIMILARITY
        ]
        rng.shuffle(others)
        distractors: List[str] = []
        for other in others:
            if len(distractors) >= 3:
                break
            if all(similarity(other, d) < DISTRACTOR_SIMILARITY for d in distractors):
                distractors.append(other)
        if len(distractors) < 3:
            unrelated = [p for p in pool if subject.lower() not in p.lower()]
            extra = synthesize(correct, unrelated, rng, 3 - len(distractors), subject=subject)
            distractors += [e for e in extra if all(similarity(e, d) < DISTRACTOR_SIMILARITY for d in distractors)]
        prompt = f"What is the best definition of {subject}?"
        question = build_single_choice(prompt, correct, distractors, difficulty, "definition", rng, subject)
        if question:
            questions.append(question)
    return questions


# ─── Comparison MCQ ───────────────────────────────────────────────────────────

def _comparison_sides(match: RuleMatch) -> Tuple[str, str]:
    # "Diesel engines are more efficient compared to ..." → "Diesel engines"
    left_text = match.subject.strip()
    clause = SUBJECT_VERB_COMPLEMENT.match(left_text) if left_text else None
    if clause:
        left_text = clause.subject
    left = short_subject(left_text, 3) if left_text else ""
    right_words = [w.strip(",") for w in match.object.split()[:3]]
    right = short_subject(" ".join(right_words), 3)
    if not left:
        left = infer_subject(match.object)
    return left, right


def generate_comparison_mcqs(
    chunks: List[Chunk], facts: List[Fact], difficulty: str, rng: random.Random
) -> List[QuestionCandidate]:
    target = generator_count("comparison", difficulty)
    sentences = _unique(
        [s for s in _chunk_sentences(chunks) if FactExtractor.is_comparison(s)]
        + [f.text for f in facts if f.kind == "comparison"]
    )
    matches = [m for m in (COMPARISON.match(s) for s in sentences) if m]

    questions: List[QuestionCandidate] = []
    for match in matches:
        if len(questions) >= target:
            break
        left, right = _comparison_sides(match)
        correct = strip_terminal(match.sentence)
        distractors = [
            strip_terminal(m.sentence)
            for m in matches
            if m is not match and similarity(m.sentence, correct) < DISTRACTOR_SIMILARITY
        ]
        rng.shuffle(distractors)
        lead = left[:1].upper() + left[1:]
        distractors = distractors[:2] + [
            f"There is no significant difference between {left} and {right}",
            f"{lead} and {right} are essentially interchangeable",
            f"{lead} has no measurable relationship to {right}",
        ]
        prompt = f"Which statement correctly compares {left} and {right}?"
        question = build_single_choice(prompt, correct, distractors[:3], difficulty, "comparison", rng, left)
        if question:
            questions.append(question)
    return questions


# ─── Exam-style MCQ ───────────────────────────────────────────────────────────

def exam_quality(text: str) -> int:
    """Causal, definitional, numeric, ordering and contrast language each add weight."""
    low = f" {text.lower()} "
    score = 0
    if any(w in low for w in CAUSAL_WORDS):
        score += 2
    if any(w in low for w in DEFINITIONAL_WORDS):
        score += 2
    if has_number(text):
        score += 2
    if any(re.search(rf"\b{w}\b", low) for w in ORDERING_WORDS):
        score += 1
    if any(re.search(rf"\b{w}\b", low) for w in CONTRAST_WORDS):
        score += 1
    if len(split_sentences(text)) == 1:
        score += 1
    return score


def exam_topic(text: str) -> str:
    """Subject phrase for exam prompts, keeping its article: "the Sun", not "Sun"."""
    match = SUBJECT_VERB_COMPLEMENT.match(text)
    if match:
        words = match.subject.split()
        limit = 6 if words and words[0].lower() in ("the", "a", "an") else 5
        return lower_first(" ".join(words[:limit]))
    return infer_subject(text)


def generate_exam_mcqs(
    chunks: List[Chunk], facts: List[Fact], difficulty: str, rng: random.Random
) -> List[QuestionCandidate]:
    target = generator_count("exam", difficulty)
    templates = EXAM_TEMPLATES.get(difficulty, EXAM_TEMPLATES["medium"])
    pool = _fact_pool(facts)
    ranked = sorted(facts, key=lambda f: exam_quality(f.text), reverse=True)

    questions: List[QuestionCandidate] = []
    for i, fact in enumerate(ranked[:target]):
        topic = exam_topic(fact.text)
        correct = format_option(fact.text)
        candidates = synthesize(fact.text, pool, rng, distractor_count(difficulty), subject=topic)
        distractors = pick_distractors(correct, candidates, difficulty)
        prompt = templates[i % len(templates)].format(topic=topic, **verb_forms(topic))
        question = build_single_choice(prompt, correct, distractors, difficulty, "exam", rng, topic)
        if question:
            questions.append(question)
    return questions

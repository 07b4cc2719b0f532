"""
Multiple-select (MSQ) generator.

Looks for enumeration sentences ("The system includes caching, indexing, and compaction."),
samples 1–3 listed items as correct answers and fills the remaining slots with
incorrect items until exactly 4 options exist:
  related terms co-occurring with the subject → modifier recombinations → generic fillers.
"""

from typing import List, Optional
import random
import re

from generation.config import ANSWER_MATCH_SIMILARITY, generator_count
from generation.options import OptionSet, format_option, format_question
from generation.schemas import QuestionCandidate
from parsing.fact_extractor import Fact
from parsing.patterns import (
    INDICATOR_VERBS,
    LIST_CUES,
    LIST_ENUMERATION,
    has_list_cue,
    is_pronoun,
    lower_first,
    normalize_key,
    split_list_items,
    split_sentences,
    strip_article,
)
from parsing.segmenter import Chunk
from parsing.text_metrics import STOPWORDS, similarity

MSQ_OPTIONS = 4
MAX_CORRECT = 3
ITEM_MIN_CHARS = 5

RECOMBINATION_MODIFIERS = ["Manual", "Static", "Legacy", "Reverse", "Partial", "Offline"]

MSQ_FILLERS = [
    "Random sampling",
    "Manual configuration",
    "External auditing",
    "Periodic rebooting",
    "Static allocation",
    "Legacy processing",
]

_CUE_WORDS = {w for cue in LIST_CUES for w in cue.split()}

_VERB_BASE = {
    "consists of": "consist of",
    "consist of": "consist of",
    "comprises": "comprise",
    "comprise": "comprise",
}


def _prompt(subject: str, predicate: str) -> str:
    verb = _VERB_BASE.get(predicate.lower(), "include")
    name = lower_first(subject)
    last = name.split()[-1].lower() if name.split() else ""
    aux = "do" if last.endswith("s") and not last.endswith("ss") else "does"
    return f"What {aux} {name} {verb}? Select all that apply."


def _msq_subject(subject: str) -> str:
    s = re.sub(r"\b(?:there\s+(?:are|is)|are|is|the following|several|various)\s*$", "", subject.strip(), flags=re.I)
    s = s.strip(" ,:")
    if not s or is_pronoun(s) or len(strip_article(s)) < 3:
        return "the topic"
    return s


def _related_terms(subject: str, items: List[str], chunks: List[Chunk]) -> List[str]:
    """Content words that appear in sentences mentioning the subject but are not listed items."""
    subject_words = {w.lower() for w in strip_article(subject).split() if len(w) > 3}
    item_words = {w.lower() for item in items for w in item.split()}
    terms: List[str] = []
    seen = set()
    for chunk in chunks:
        for sentence in split_sentences(chunk.text):
            low = sentence.lower()
            if subject_words and not any(w in low for w in subject_words):
                continue
            for word in re.findall(r"[A-Za-z][a-z]+", sentence):
                key = word.lower()
                if (
                    len(key) < ITEM_MIN_CHARS
                    or key in STOPWORDS
                    or key in INDICATOR_VERBS
                    or key in _CUE_WORDS
                    or key in subject_words
                    or key in item_words
                    or key in seen
                ):
                    continue
                seen.add(key)
                terms.append(word.capitalize())
    return terms


def _recombinations(items: List[str], rng: random.Random) -> List[str]:
    """Modifier + item pairs; items keep their case so proper nouns and acronyms survive."""
    modifiers = list(RECOMBINATION_MODIFIERS)
    rng.shuffle(modifiers)
    return [f"{modifier} {strip_article(item)}" for modifier, item in zip(modifiers, items * 2)]


def _correct_indices(options: List[str], correct: List[str]) -> List[int]:
    """Match correct items to shuffled options by normalized text, then similarity > 0.7."""
    indices = set()
    for item in correct:
        key = normalize_key(item)
        exact = [i for i, o in enumerate(options) if normalize_key(o) == key]
        if exact:
            indices.add(exact[0])
            continue
        scored = [(similarity(item, o), i) for i, o in enumerate(options) if i not in indices]
        if scored:
            score, best = max(scored)
            if score > ANSWER_MATCH_SIMILARITY:
                indices.add(best)
    return sorted(indices)


def build_msq(
    sentence: str, chunks: List[Chunk], difficulty: str, rng: random.Random
) -> Optional[QuestionCandidate]:
    """One multi-select question from an enumeration sentence, or None if it has < 2 usable items."""
    match = LIST_ENUMERATION.match(sentence)
    if not match:
        return None
    subject = _msq_subject(match.subject)

    raw_items = [i for i in split_list_items(match.object) if len(i) >= ITEM_MIN_CHARS]
    accepted = OptionSet(subject=subject)
    for item in raw_items:
        accepted.add(item)
    items = list(accepted.options)
    if len(items) < 2:
        return None

    n_correct = rng.randint(1, min(MAX_CORRECT, len(items)))
    correct = rng.sample(items, n_correct)

    option_set = OptionSet(correct, subject=subject)
    incorrect_sources = [
        _related_terms(subject, items, chunks),
        _recombinations(raw_items, rng),
        MSQ_FILLERS,
    ]
    for source in incorrect_sources:
        candidates = list(source)
        rng.shuffle(candidates)
        for candidate in candidates:
            if len(option_set) >= MSQ_OPTIONS:
                break
            if normalize_key(format_option(candidate)) in {normalize_key(i) for i in items}:
                continue
            option_set.add(candidate)
    option_set.normalize().dedupe().pad_to_count(MSQ_OPTIONS).shuffle(rng)

    answer = _correct_indices(option_set.options, correct)
    if not answer:
        return None
    return QuestionCandidate(
        prompt=format_question(_prompt(subject, match.predicate)),
        options=option_set.options,
        answer=answer,
        type="multiple",
        difficulty=difficulty,
        source="msq",
    )


def generate_msqs(
    chunks: List[Chunk], facts: List[Fact], difficulty: str, rng: random.Random
) -> List[QuestionCandidate]:
    target = generator_count("msq", difficulty)
    sentences = [s for chunk in chunks for s in split_sentences(chunk.text)] + [f.text for f in facts]
    seen = set()
    questions: List[QuestionCandidate] = []
    for sentence in sentences:
        if len(questions) >= target:
            break
        key = normalize_key(sentence)
        if key in seen or not has_list_cue(sentence):
            continue
        seen.add(key)
        question = build_msq(sentence, chunks, difficulty, rng)
        if question:
            questions.append(question)
    return questions

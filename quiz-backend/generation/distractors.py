"""
Distractor synthesis: plausible-but-wrong answer options.

Strategies are tried round-robin (up to MAX_ROUNDS) and each returns a candidate
string or None:
  1. unrelated_fact      — a clause lifted from another fact
  2. reverse_qualifier   — always↔never, most↔few, or "X because Y" → "Y because X"
  3. perturb_number      — shift an embedded number by a magnitude-dependent amount
  4. swap_qualifier      — replace a qualifier with a random semantic alternative
  5. fabricate           — academic-sounding templated claim about the subject

A candidate is accepted only if it is not a duplicate and its similarity to the
correct answer (and to every accepted distractor) stays below DISTRACTOR_SIMILARITY.
Any shortfall is padded with generic fillers, so the requested count is always met.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional
import logging
import random
import re

from generation.config import DISTRACTOR_SIMILARITY
from generation.options import fill_template, format_option, short_subject, template_options
from parsing.patterns import (
    CAUSE_EFFECT,
    COPULA,
    NUMBER_PATTERN,
    SUBJECT_VERB_COMPLEMENT,
    lower_first,
    normalize_key,
    strip_terminal,
)
from parsing.text_metrics import STOPWORDS, similarity, tokenize

log = logging.getLogger(__name__)

MAX_ROUNDS = 3
DEFAULT_COUNT = 3
HARD_COUNT = 4

QUALIFIER_OPPOSITES = {
    "always": "never", "never": "always", "most": "few", "few": "most",
    "all": "no", "none": "all", "many": "few", "more": "less", "less": "more",
    "increases": "decreases", "decreases": "increases", "increase": "decrease", "decrease": "increase",
    "higher": "lower", "lower": "higher", "larger": "smaller", "smaller": "larger",
    "before": "after", "after": "before", "first": "last", "last": "first",
    "maximum": "minimum", "minimum": "maximum", "often": "rarely", "rarely": "often",
    "positive": "negative", "negative": "positive", "strong": "weak", "weak": "strong",
    "internal": "external", "external": "internal", "fast": "slow", "slow": "fast",
    "gains": "loses", "loses": "gains", "absorbs": "releases", "releases": "absorbs",
}

QUALIFIER_ALTERNATIVES = {
    "always": ["rarely", "occasionally", "never"],
    "never": ["sometimes", "often", "always"],
    "most": ["few", "some", "hardly any"],
    "all": ["some", "few", "only a handful of"],
    "many": ["few", "only a couple of"],
    "significantly": ["slightly", "marginally", "negligibly"],
    "often": ["rarely", "seldom"],
    "usually": ["rarely", "seldom"],
    "primarily": ["rarely", "secondarily"],
    "mainly": ["partly", "rarely"],
    "completely": ["partially", "barely"],
    "highly": ["slightly", "moderately"],
    "every": ["some", "no"],
    "frequently": ["rarely", "occasionally"],
    "only": ["also", "rarely"],
}

ANTONYMS = {
    **QUALIFIER_OPPOSITES,
    "include": "exclude", "includes": "excludes", "important": "unimportant",
    "possible": "impossible", "efficient": "inefficient", "stable": "unstable",
    "common": "rare", "rare": "common", "simple": "complex", "complex": "simple",
    "natural": "artificial", "visible": "invisible", "active": "passive",
    "early": "late", "late": "early", "high": "low", "low": "high",
    "large": "small", "small": "large", "increasing": "decreasing", "decreasing": "increasing",
}

FABRICATION_TEMPLATES = [
    "{subject} {has} no measurable effect",
    "{subject} {be} a purely theoretical idea",
    "{subject} {be} now regarded as obsolete",
    "{subject} {be} only seen in laboratories",
    "{subject} {was} dropped after early trials",
    "{subject} {be} driven entirely by funding",
]

AUXILIARY = re.compile(r"\b(is|are|was|were|can|will|should|must|does|do|has been|have been)\b(?!\s+not\b)")
NEGATED_AUXILIARY = re.compile(r"\b(is|are|was|were|will|should|must|does|do)\s+not\b|\bcannot\b")


def distractor_count(difficulty: str) -> int:
    return HARD_COUNT if difficulty == "hard" else DEFAULT_COUNT


def _match_case(original: str, replacement: str) -> str:
    if original.isupper() and len(original) > 1:
        return replacement.upper()
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _replace_word(text: str, table: dict, rng: Optional[random.Random] = None) -> Optional[str]:
    """Replace the first word found in table (value may be a list of alternatives)."""
    for m in re.finditer(r"[A-Za-z]+", text):
        word = m.group(0)
        target = table.get(word.lower())
        if not target:
            continue
        if isinstance(target, list):
            target = rng.choice(target) if rng else target[0]
        return text[:m.start()] + _match_case(word, target) + text[m.end():]
    return None


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:] if text else text


def infer_subject(text: str) -> str:
    """Best-effort subject noun phrase for templates."""
    match = SUBJECT_VERB_COMPLEMENT.match(text)
    if match:
        return short_subject(match.subject)
    words = [w for w in tokenize(text) if w not in STOPWORDS and len(w) > 3]
    return " ".join(words[:2]) or "this topic"


# ─── Single transforms ────────────────────────────────────────────────────────

def perturb_number_value(token: str, rng: random.Random) -> str:
    """
    Shift one number by a magnitude-dependent amount, keeping its decimal precision.

    > 100 → ±50–80%,  > 10 → ±(30% + 3),  otherwise ±1..3. Four-digit years move by 1–30.
    """
    plain = token.replace(",", "")
    decimals = len(plain.split(".")[1]) if "." in plain else 0
    value = float(plain)
    magnitude = abs(value)
    is_year = decimals == 0 and 1000 <= value <= 2100 and "," not in token
    if is_year:
        delta = rng.randint(1, 30)
    elif magnitude > 100:
        delta = magnitude * rng.uniform(0.5, 0.8)
    elif magnitude > 10:
        delta = magnitude * 0.3 + 3
    else:
        delta = rng.randint(1, 3)
    new_value = value + delta if rng.random() < 0.5 else value - delta
    if new_value <= 0 < value:
        new_value = value + delta

    if decimals:
        result = f"{new_value:.{decimals}f}"
    elif "," in token:
        result = f"{int(round(new_value)):,}"
    else:
        result = str(int(round(new_value)))
    if result == token:
        result = str(int(round(value)) + 1) if not decimals else f"{value + 1:.{decimals}f}"
    return result


def perturb_numbers(text: str, rng: random.Random) -> Optional[str]:
    """Replace one embedded number with a perturbed value; None if the text has no number."""
    # version-like tokens ("3.10.2") are not quantities
    matches = [m for m in NUMBER_PATTERN.finditer(text or "") if m.group(0).replace(",", "").count(".") <= 1]
    if not matches:
        return None
    m = rng.choice(matches)
    return text[:m.start()] + perturb_number_value(m.group(0), rng) + text[m.end():]


def invert_cause_effect(text: str) -> Optional[str]:
    """'X because Y' → 'Y because X'."""
    match = CAUSE_EFFECT.match(text)
    if not match or not match.subject or not match.object:
        return None
    return f"{_capitalize(match.object)} {match.predicate.lower()} {lower_first(match.subject)}"


def reverse_qualifier(text: str) -> Optional[str]:
    return _replace_word(text, QUALIFIER_OPPOSITES) or invert_cause_effect(text)


def swap_qualifier(text: str, rng: random.Random) -> Optional[str]:
    return _replace_word(text, QUALIFIER_ALTERNATIVES, rng)


def insert_negation(text: str) -> Optional[str]:
    """'X is Y' → 'X is not Y'; an already negated auxiliary is un-negated instead."""
    negated = NEGATED_AUXILIARY.search(text)
    if negated:
        fixed = "can" if negated.group(0).lower() == "cannot" else negated.group(1)
        return text[:negated.start()] + fixed + text[negated.end():]
    m = AUXILIARY.search(text)
    if not m:
        return None
    aux = m.group(1)
    replacement = "cannot" if aux.lower() == "can" else f"{aux} not"
    return text[:m.start()] + _match_case(aux, replacement) + text[m.end():]


def replace_with_antonym(text: str) -> Optional[str]:
    """Swap a salient word for its antonym; '-able' adjectives get an 'un' prefix."""
    swapped = _replace_word(text, ANTONYMS)
    if swapped:
        return swapped
    m = re.search(r"\b([a-z]{3,}able)\b", text)
    if m and not m.group(1).startswith("un"):
        return text[:m.start()] + "un" + m.group(1) + text[m.end():]
    return None


def swap_around_copula(text: str) -> Optional[str]:
    """'X is Y' → 'Y is X' when both sides are short phrases."""
    match = COPULA.match(text)
    if not match or len(match.object.split()) > 6 or len(match.subject.split()) > 6:
        return None
    return f"{_capitalize(match.object)} {match.predicate} {lower_first(match.subject)}"


def make_false_statement(statement: str, rng: random.Random) -> str:
    """
    Turn a true statement into a false one.

    Transforms are tried in random order; the first that changes the text wins.
    Falls back to an explicit "It is not the case that ..." wrapper.
    """
    body = strip_terminal(statement)
    transforms: List[Callable[[str], Optional[str]]] = [
        insert_negation,
        replace_with_antonym,
        lambda s: perturb_numbers(s, rng),
        swap_around_copula,
    ]
    rng.shuffle(transforms)
    for transform in transforms:
        result = transform(body)
        if result and normalize_key(result) != normalize_key(body):
            return _capitalize(result.strip()) + "."
    return f"It is not the case that {lower_first(body)}."


# ─── Synthesizer ──────────────────────────────────────────────────────────────

@dataclass
class DistractorContext:
    """Read-only inputs shared by the strategies for one question."""
    correct: str
    pool: List[str]
    subject: str
    rng: random.Random
    used_pool: set = field(default_factory=set)

    def source(self, round_no: int) -> str:
        """The correct answer first; later rounds transform a random pool fact instead."""
        if round_no == 0 or not self.pool:
            return self.correct
        return self.rng.choice(self.pool)


def _clause_like(text: str, correct: str) -> str:
    """Shape a pool fact like the correct answer: full sentence or bare complement."""
    if SUBJECT_VERB_COMPLEMENT.match(correct):
        return strip_terminal(text)
    match = SUBJECT_VERB_COMPLEMENT.match(text)
    return match.object if match else strip_terminal(text)


def _unrelated_fact(ctx: DistractorContext, round_no: int) -> Optional[str]:
    remaining = [p for p in ctx.pool if p not in ctx.used_pool]
    if not remaining:
        return None
    fact = ctx.rng.choice(remaining)
    ctx.used_pool.add(fact)
    return _clause_like(fact, ctx.correct)


def _reverse(ctx: DistractorContext, round_no: int) -> Optional[str]:
    return reverse_qualifier(strip_terminal(ctx.source(round_no)))


def _numeric(ctx: DistractorContext, round_no: int) -> Optional[str]:
    return perturb_numbers(strip_terminal(ctx.source(round_no)), ctx.rng)


def _swap(ctx: DistractorContext, round_no: int) -> Optional[str]:
    return swap_qualifier(strip_terminal(ctx.source(round_no)), ctx.rng)


def _fabricate(ctx: DistractorContext, round_no: int) -> Optional[str]:
    return fill_template(ctx.rng.choice(FABRICATION_TEMPLATES), ctx.subject)


STRATEGIES: List[Callable[[DistractorContext, int], Optional[str]]] = [
    _unrelated_fact,
    _reverse,
    _numeric,
    _swap,
    _fabricate,
]


def _acceptable(candidate: str, correct: str, accepted: List[str]) -> bool:
    key = normalize_key(candidate)
    if not key or key == normalize_key(correct):
        return False
    if any(key == normalize_key(a) for a in accepted):
        return False
    if similarity(candidate, correct) >= DISTRACTOR_SIMILARITY:
        return False
    return all(similarity(candidate, a) < DISTRACTOR_SIMILARITY for a in accepted)


def generic_fillers(subject: str, correct: str, accepted: List[str], count: int) -> List[str]:
    """Templated fillers unique against the correct answer and each other."""
    taken = {normalize_key(correct), *(normalize_key(a) for a in accepted)}
    fillers: List[str] = []
    for option in template_options(subject):
        if len(fillers) >= count:
            break
        if normalize_key(option) not in taken:
            taken.add(normalize_key(option))
            fillers.append(option)
    n = 1
    while len(fillers) < count:
        option = f"Not stated in the material ({n})"
        if normalize_key(option) not in taken:
            taken.add(normalize_key(option))
            fillers.append(option)
        n += 1
    return fillers


def synthesize(
    correct: str,
    pool: List[str],
    rng: random.Random,
    count: int = DEFAULT_COUNT,
    subject: Optional[str] = None,
) -> List[str]:
    """
    Produce exactly `count` formatted distractors for `correct`.

    Args:
        correct: The correct answer text
        pool:    Other fact sentences usable as distractor material
        rng:     Injected random source
        count:   Number of distractors wanted
        subject: Subject noun phrase for templates (inferred when omitted)

    Returns:
        List of `count` option strings, none equal or near-identical to `correct`
    """
    correct_f = format_option(correct)
    subj = short_subject(subject) if subject else infer_subject(correct)
    others = [p for p in pool if normalize_key(p) != normalize_key(correct)]
    ctx = DistractorContext(correct=strip_terminal(correct), pool=others, subject=subj, rng=rng)

    accepted: List[str] = []
    for round_no in range(MAX_ROUNDS):
        for strategy in STRATEGIES:
            if len(accepted) >= count:
                break
            candidate = strategy(ctx, round_no)
            if not candidate:
                continue
            candidate = format_option(candidate)
            if _acceptable(candidate, correct_f, accepted):
                accepted.append(candidate)
        if len(accepted) >= count:
            break

    if len(accepted) < count:
        log.debug("distractor shortfall %d/%d for '%s', padding", len(accepted), count, correct_f[:40])
        accepted += generic_fillers(subj, correct_f, accepted, count - len(accepted))
    return accepted[:count]


def pick_distractors(correct: str, candidates: List[str], difficulty: str, k: int = DEFAULT_COUNT) -> List[str]:
    """On hard difficulty keep the k candidates closest to the correct answer (most plausible)."""
    if difficulty != "hard" or len(candidates) <= k:
        return candidates[:k]
    return sorted(candidates, key=lambda c: similarity(c, correct), reverse=True)[:k]

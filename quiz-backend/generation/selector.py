"""
Step 6 — Question Selector

Trims the combined candidate pool to the difficulty budget (easy 5 / medium 10 / hard 15)
while keeping the quiz type-diverse:
  exam ≈ 50%, multi-select ≈ 25%, factual (incl. definition/comparison) ≈ 25%,
  true/false fills the remainder (at least 1). Short families are backfilled
  from the ranked pool. Final ids are contiguous in selection order.
"""

from typing import Dict, List, Tuple
import re

from generation.config import quiz_budget
from generation.options import format_option, format_question
from generation.schemas import TRUE_FALSE_OPTIONS, FinalQuestion, QuestionCandidate
from generation.validator import validate_candidates
from parsing.patterns import MONTHS, has_number, normalize_key

FAMILY_OF = {
    "exam": "exam",
    "msq": "msq",
    "factual": "factual",
    "definition": "factual",
    "comparison": "factual",
    "true_false": "true_false",
}

TWO_CAPITALIZED_WORDS = re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+\b")


def _detail_score(candidate: QuestionCandidate) -> int:
    """Concrete detail markers: numbers, month names, two-capitalized-word sequences."""
    text = " ".join([candidate.prompt] + candidate.options)
    low = text.lower()
    score = 0
    if has_number(text):
        score += 1
    if any(re.search(rf"\b{m}\b", low) for m in MONTHS):
        score += 1
    if TWO_CAPITALIZED_WORDS.search(text):
        score += 1
    return score


def _rank_key(candidate: QuestionCandidate) -> Tuple[int, int, int]:
    return (1 if candidate.type == "multiple" else 0, _detail_score(candidate), len(candidate.prompt))


def family_quotas(budget: int) -> Dict[str, int]:
    exam = budget // 2
    msq = budget // 4
    factual = budget // 4
    return {
        "exam": exam,
        "msq": msq,
        "factual": factual,
        "true_false": max(1, budget - exam - msq - factual),
    }


def _dedupe_prompts(candidates: List[QuestionCandidate]) -> List[QuestionCandidate]:
    seen = set()
    unique = []
    for candidate in candidates:
        key = normalize_key(candidate.prompt)
        if key not in seen:
            seen.add(key)
            unique.append(candidate)
    return unique


def _finalize(candidate: QuestionCandidate, question_id: int) -> FinalQuestion:
    options = candidate.options
    if options != TRUE_FALSE_OPTIONS:
        options = [format_option(o) for o in options]
    return FinalQuestion(
        id=question_id,
        question=format_question(candidate.prompt),
        options=options,
        answer=candidate.answer,
        type=candidate.type,
        difficulty=candidate.difficulty,
    )


def select_questions(candidates: List[QuestionCandidate], difficulty: str) -> List[FinalQuestion]:
    """
    Validate, rank and trim candidates into the final ordered question list.

    Args:
        candidates: Union of every generator's output
        difficulty: easy | medium | hard

    Returns:
        At most quiz_budget(difficulty) FinalQuestion objects with ids 1..N
    """
    budget = quiz_budget(difficulty)
    valid = _dedupe_prompts(validate_candidates(candidates))
    ranked = sorted(valid, key=_rank_key, reverse=True)

    quotas = family_quotas(budget)
    taken: Dict[str, int] = {family: 0 for family in quotas}
    selected: List[QuestionCandidate] = []
    chosen_ids = set()

    for candidate in ranked:
        if len(selected) >= budget:
            break
        family = FAMILY_OF.get(candidate.source, "factual")
        if taken[family] < quotas[family]:
            taken[family] += 1
            selected.append(candidate)
            chosen_ids.add(id(candidate))

    # Backfill from the ranked pool when a family came up short
    for candidate in ranked:
        if len(selected) >= budget:
            break
        if id(candidate) not in chosen_ids:
            selected.append(candidate)
            chosen_ids.add(id(candidate))

    return [_finalize(candidate, i) for i, candidate in enumerate(selected, start=1)]

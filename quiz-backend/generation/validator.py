"""
Step 5 — Candidate Validator

Deterministic checks on each generated question:
- Prompt length, upper-case first letter
- Option count (2 or 4, padded or trimmed), option length, repeated options
- Option-set similarity (near-identical options)
- Answer index repair (never raised as an error)
- Duplicate prompt detection across the candidate pool
"""

from typing import List, Optional, Tuple
import logging

from generation.config import OPTION_SET_SIMILARITY
from generation.options import OptionSet, format_option, format_question
from generation.schemas import TRUE_FALSE_OPTIONS, QuestionCandidate
from parsing.patterns import normalize_key
from parsing.text_metrics import similarity

log = logging.getLogger(__name__)

PROMPT_MIN_CHARS = 10
OPTION_MIN_CHARS = 5
ALLOWED_OPTION_COUNTS = (2, 4)


# ─── Duplicate detection ───────────────────────────────────────────────────────

def detect_duplicate_prompts(candidates: List[QuestionCandidate]) -> List[str]:
    """Return human-readable warnings for candidates whose prompts normalize to the same text."""
    seen = {}
    duplicates = []
    for i, candidate in enumerate(candidates):
        key = normalize_key(candidate.prompt)
        if key in seen:
            duplicates.append(f"Q{seen[key] + 1} and Q{i + 1} share the prompt '{candidate.prompt[:60]}'")
        else:
            seen[key] = i
    return duplicates


def _max_pairwise_similarity(options: List[str]) -> float:
    best = 0.0
    for i in range(len(options)):
        for j in range(i + 1, len(options)):
            best = max(best, similarity(options[i], options[j]))
    return best


def _repair_option_count(options: List[str], answers: List[int]) -> Optional[Tuple[List[str], List[int]]]:
    """Pad short option lists with templated fillers, trim long ones around the answers."""
    if len(options) in ALLOWED_OPTION_COUNTS:
        return options, answers
    if not options:
        return None
    target = max(ALLOWED_OPTION_COUNTS)
    if len(options) < target:
        return OptionSet(options).pad_to_count(target).options, answers
    keep = [i for i in range(len(options)) if i in answers][:target]
    keep += [i for i in range(len(options)) if i not in keep][:target - len(keep)]
    keep.sort()
    return [options[i] for i in keep], [keep.index(i) for i in answers if i in keep]


def _repair_repeats(options: List[str], answers: List[int]) -> Optional[List[str]]:
    """Replace repeated distractors; a repeated answer cannot be repaired."""
    option_set = OptionSet(options)
    if not option_set.replace_repeats(protected=answers):
        return None
    return option_set.options


def _repair_answer(kind: str, answer, n_options: int):
    """Single: out-of-range → 0. Multiple: keep valid indices, default [0]."""
    if kind == "single":
        if isinstance(answer, list):
            answer = answer[0] if answer else 0
        return answer if 0 <= answer < n_options else 0
    indices = answer if isinstance(answer, list) else [answer]
    valid = sorted({i for i in indices if 0 <= i < n_options})
    return valid or [0]


# ─── Main entry ────────────────────────────────────────────────────────────────

def validate_candidate(candidate: QuestionCandidate) -> Optional[QuestionCandidate]:
    """
    Reject or repair one candidate.

    Args:
        candidate: Generator output

    Returns:
        A formatted, repaired copy, or None if the candidate must be discarded
    """
    prompt = format_question(candidate.prompt)
    if len(prompt) < PROMPT_MIN_CHARS or not prompt[:1].isupper():
        return None

    options = [format_option(o) for o in candidate.options]
    answer = candidate.answer
    if options != TRUE_FALSE_OPTIONS:
        if any(not o for o in options):
            return None
        repaired = _repair_option_count(options, candidate.answer_indices)
        if repaired is None:
            return None
        options, answers = repaired
        options = _repair_repeats(options, answers)
        if options is None:
            return None
        if candidate.type == "single":
            answer = answers[0] if answers else 0
        else:
            answer = answers

    keys = [normalize_key(o) for o in options]
    if len(set(keys)) != len(keys):
        return None

    if options != TRUE_FALSE_OPTIONS:
        if any(len(o) < OPTION_MIN_CHARS for o in options):
            return None
        if _max_pairwise_similarity(options) > OPTION_SET_SIMILARITY:
            return None

    return candidate.model_copy(update={
        "prompt": prompt,
        "options": options,
        "answer": _repair_answer(candidate.type, answer, len(options)),
    })


def validate_candidates(candidates: List[QuestionCandidate]) -> List[QuestionCandidate]:
    valid = [v for v in (validate_candidate(c) for c in candidates) if v is not None]
    dup_issues = detect_duplicate_prompts(valid)
    if dup_issues:
        log.debug("duplicate prompts: %s", dup_issues)
    log.debug("validator kept %d/%d candidates", len(valid), len(candidates))
    return valid

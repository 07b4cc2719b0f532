"""
Tunable constants for the quiz generation pipeline.

Every value can be overridden through the environment (.env is loaded by quiz_api.py).
The similarity thresholds are empirical; keep them configurable rather than hard-coded.
"""

import os

# ── Input gate ─────────────────────────────────────────────────────────────────
MIN_TEXT_LENGTH = int(os.getenv("QUIZ_MIN_TEXT_LENGTH", "200"))

# ── Stage minimums ─────────────────────────────────────────────────────────────
MIN_CHUNKS = int(os.getenv("QUIZ_MIN_CHUNKS", "3"))
MIN_FACTS = int(os.getenv("QUIZ_MIN_FACTS", "5"))
MIN_QUESTIONS = int(os.getenv("QUIZ_MIN_QUESTIONS", "3"))

# ── Similarity thresholds (word-overlap ratio weighted by length ratio) ───────
DEFINITION_DISTRACTOR_SIMILARITY = float(os.getenv("QUIZ_DEFINITION_DISTRACTOR_SIMILARITY", "0.5"))
DISTRACTOR_SIMILARITY = float(os.getenv("QUIZ_DISTRACTOR_SIMILARITY", "0.7"))
ANSWER_MATCH_SIMILARITY = float(os.getenv("QUIZ_ANSWER_MATCH_SIMILARITY", "0.7"))
OPTION_SET_SIMILARITY = float(os.getenv("QUIZ_OPTION_SET_SIMILARITY", "0.8"))
KEY_PHRASE_OVERLAP = float(os.getenv("QUIZ_KEY_PHRASE_OVERLAP", "0.7"))

# ── Output shaping ─────────────────────────────────────────────────────────────
MINUTES_PER_QUESTION = float(os.getenv("QUIZ_MINUTES_PER_QUESTION", "1.5"))
OPTION_MAX_CHARS = int(os.getenv("QUIZ_OPTION_MAX_CHARS", "50"))
OPTION_MAX_WORDS = int(os.getenv("QUIZ_OPTION_MAX_WORDS", "10"))

# Unset → nondeterministic; set an int for reproducible quizzes.
_seed = os.getenv("QUIZ_RANDOM_SEED")
RANDOM_SEED = int(_seed) if _seed not in (None, "") else None

# ── Budgets ────────────────────────────────────────────────────────────────────
QUIZ_BUDGET = {"easy": 5, "medium": 10, "hard": 15}

GENERATOR_COUNTS = {
    "factual":    {"easy": 5, "medium": 8, "hard": 12},
    "definition": {"easy": 3, "medium": 5, "hard": 8},
    "msq":        {"easy": 2, "medium": 3, "hard": 5},
    "exam":       {"easy": 5, "medium": 10, "hard": 15},
    "true_false": {"easy": 3, "medium": 5, "hard": 7},
    "comparison": {"easy": 2, "medium": 3, "hard": 5},
}

LEVEL_DESCRIPTIONS = {
    "easy": "Basic questions covering main concepts with straightforward answers",
    "medium": "Moderate difficulty with more specific questions and detailed answer options",
    "hard": "Challenging questions requiring deeper understanding and detailed knowledge",
}

# "normal" was the label used by the legacy level picker.
LEVEL_ALIASES = {"normal": "medium"}


def generator_count(generator: str, difficulty: str) -> int:
    """Number of candidates a generator should aim for at this difficulty."""
    return GENERATOR_COUNTS[generator].get(difficulty, GENERATOR_COUNTS[generator]["medium"])


def quiz_budget(difficulty: str) -> int:
    return QUIZ_BUDGET.get(difficulty, QUIZ_BUDGET["medium"])

"""
True/False generator.

Samples facts; about half are stated as-is (answer True), the rest go through
make_false_statement() and the answer flips to False. Options are always ["True", "False"].
"""

from typing import List
import random

from generation.config import generator_count
from generation.distractors import make_false_statement
from generation.options import format_question
from generation.schemas import TRUE_FALSE_OPTIONS, QuestionCandidate
from parsing.fact_extractor import Fact
from parsing.patterns import is_question, strip_terminal
from parsing.segmenter import Chunk

STATEMENT_MIN_CHARS = 30
STATEMENT_MAX_CHARS = 200


def build_true_false(fact: Fact, difficulty: str, rng: random.Random) -> QuestionCandidate:
    statement = strip_terminal(fact.text) + "."
    if rng.random() < 0.5:
        prompt, answer = statement, 0
    else:
        prompt, answer = make_false_statement(statement, rng), 1
    return QuestionCandidate(
        prompt=format_question(prompt),
        options=list(TRUE_FALSE_OPTIONS),
        answer=answer,
        type="single",
        difficulty=difficulty,
        source="true_false",
    )


def generate_true_false(
    chunks: List[Chunk], facts: List[Fact], difficulty: str, rng: random.Random
) -> List[QuestionCandidate]:
    target = generator_count("true_false", difficulty)
    usable = [
        f for f in facts
        if STATEMENT_MIN_CHARS <= len(f.text) <= STATEMENT_MAX_CHARS and not is_question(f.text)
    ]
    sample = rng.sample(usable, min(target, len(usable)))
    return [build_true_false(fact, difficulty, rng) for fact in sample]

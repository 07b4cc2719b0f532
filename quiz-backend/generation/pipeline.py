"""
Quiz pipeline orchestration: cleaned text → Quiz.

SEGMENT → FACTS → GENERATE (→ distractors per question) → VALIDATE/SELECT → Quiz

Linear path with terminal aborts:
  < 3 chunks     → InsufficientStructureError
  < 5 facts      → InsufficientFactsError
  0 questions    → QuestionGenerationFailedError
  1–2 questions  → InsufficientQuestionsError
"""

from collections import Counter
from typing import Callable, List, Optional, Tuple
import logging
import math
import random
import re
import time

from generation.config import (
    LEVEL_ALIASES,
    LEVEL_DESCRIPTIONS,
    MIN_CHUNKS,
    MIN_FACTS,
    MIN_QUESTIONS,
    MINUTES_PER_QUESTION,
    QUIZ_BUDGET,
    RANDOM_SEED,
    quiz_budget,
)
from generation.errors import (
    InsufficientFactsError,
    InsufficientQuestionsError,
    InsufficientStructureError,
    QuestionGenerationFailedError,
)
from generation.multi_select import generate_msqs
from generation.question_generator import (
    generate_comparison_mcqs,
    generate_definition_mcqs,
    generate_exam_mcqs,
    generate_factual_mcqs,
)
from generation.schemas import LevelResponse, QuestionCandidate, Quiz
from generation.selector import select_questions
from generation.true_false import generate_true_false
from parsing.fact_extractor import Fact, extract_facts
from parsing.patterns import PRONOUNS, split_sentences
from parsing.segmenter import Chunk, segment_text
from parsing.text_metrics import STOPWORDS

log = logging.getLogger("generation.pipeline")

Generator = Callable[[List[Chunk], List[Fact], str, random.Random], List[QuestionCandidate]]

GENERATORS: List[Tuple[str, Generator]] = [
    ("factual", generate_factual_mcqs),
    ("definition", generate_definition_mcqs),
    ("msq", generate_msqs),
    ("exam", generate_exam_mcqs),
    ("true_false", generate_true_false),
]

TITLE_STOPWORDS = STOPWORDS | PRONOUNS | {
    "however", "therefore", "also", "chapter", "section", "unit", "introduction",
    "summary", "practical", "quiz", "test", "assignment", "figure", "table",
}


def normalize_difficulty(difficulty: Optional[str]) -> str:
    level = (difficulty or "medium").strip().lower()
    level = LEVEL_ALIASES.get(level, level)
    if level not in QUIZ_BUDGET:
        raise ValueError(f"Invalid difficulty level '{difficulty}'. Must be one of: easy, medium/normal, hard")
    return level


def level_info(level: str) -> LevelResponse:
    """Description and question count for a difficulty level ('normal' maps to 'medium')."""
    level = normalize_difficulty(level)
    return LevelResponse(level=level, description=LEVEL_DESCRIPTIONS[level], questionCount=quiz_budget(level))


def derive_title(text: str) -> str:
    """'<Topic> Quiz' from the most frequent capitalized term; 'Document Quiz' when none stands out."""
    counts: Counter = Counter()
    for sentence in split_sentences(text):
        words = re.findall(r"[A-Za-z][A-Za-z\-]+", sentence)
        for word in words[1:]:
            if word[0].isupper() and word.lower() not in TITLE_STOPWORDS and len(word) > 2:
                counts[word] += 1
    if not counts:
        return "Document Quiz"
    topic, freq = counts.most_common(1)[0]
    if freq < 2:
        return "Document Quiz"
    return f"{topic} Quiz"


def generate_candidates(
    chunks: List[Chunk], facts: List[Fact], difficulty: str, rng: random.Random
) -> List[QuestionCandidate]:
    """Run every generator; top up with comparison questions when the pool is below budget."""
    pool: List[QuestionCandidate] = []
    for name, generator in GENERATORS:
        produced = generator(chunks, facts, difficulty, rng)
        log.info(f"[GENERATE] {name}: {len(produced)} candidates")
        pool.extend(produced)
    if len(pool) < quiz_budget(difficulty):
        produced = generate_comparison_mcqs(chunks, facts, difficulty, rng)
        log.info(f"[GENERATE] comparison (top-up): {len(produced)} candidates")
        pool.extend(produced)
    return pool


def generate_quiz(
    text: str,
    difficulty: str = "medium",
    rng: Optional[random.Random] = None,
    quiz_id: Optional[str] = None,
    title: Optional[str] = None,
) -> Quiz:
    """
    Build a quiz from cleaned document text.

    Args:
        text:       Cleaned text (the caller checks minimum length)
        difficulty: easy | medium | hard ('normal' is accepted as medium)
        rng:        Injected random source; seeded from QUIZ_RANDOM_SEED when omitted
        quiz_id:    Caller-assigned id; defaults to 'quiz-<epoch ms>'
        title:      Caller-assigned title; derived from the text when omitted

    Returns:
        Quiz with 1..budget questions

    Raises:
        QuizGenerationError subclasses on each terminal abort condition
    """
    difficulty = normalize_difficulty(difficulty)
    rng = rng or random.Random(RANDOM_SEED)

    chunks = segment_text(text)
    log.info(f"[SEGMENT] {len(chunks)} chunks from {len(text or '')} chars")
    if len(chunks) < MIN_CHUNKS:
        raise InsufficientStructureError(
            f"Only {len(chunks)} usable text sections were found (need at least {MIN_CHUNKS})"
        )

    facts = extract_facts(chunks)
    log.info(f"[FACTS] {len(facts)} facts extracted")
    if len(facts) < MIN_FACTS:
        raise InsufficientFactsError(
            f"Only {len(facts)} factual statements were found (need at least {MIN_FACTS})"
        )

    candidates = generate_candidates(chunks, facts, difficulty, rng)
    questions = select_questions(candidates, difficulty)
    log.info(f"[SELECT] {len(questions)}/{len(candidates)} questions selected (difficulty={difficulty})")
    if not questions:
        raise QuestionGenerationFailedError()
    if len(questions) < MIN_QUESTIONS:
        raise InsufficientQuestionsError(
            f"Only {len(questions)} valid questions could be generated (need at least {MIN_QUESTIONS})"
        )

    return Quiz(
        id=quiz_id or f"quiz-{int(time.time() * 1000)}",
        title=title or derive_title(text),
        questions=questions,
        totalQuestions=len(questions),
        estimatedTime=math.ceil(len(questions) * MINUTES_PER_QUESTION),
    )

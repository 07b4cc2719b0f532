"""
Quiz Router — /quiz

Endpoints:
  POST /quiz/generate  — build a quiz from cleaned document text
  POST /quiz/level     — describe a difficulty level and its question count
"""

import logging

from fastapi import APIRouter, HTTPException

from generation.config import MIN_TEXT_LENGTH
from generation.errors import QuizGenerationError
from generation.pipeline import generate_quiz, level_info
from generation.schemas import LevelRequest, LevelResponse, Quiz, QuizRequest

router = APIRouter(prefix="/quiz", tags=["quiz"])

# Use Python's standard logger so output appears in the uvicorn console
log = logging.getLogger("generation.pipeline")
logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")


@router.post("/generate", response_model=Quiz, response_model_by_alias=True)
def generate(request: QuizRequest):
    """
    **Generate a quiz from cleaned document text.**

    The text is segmented, mined for facts, turned into candidate questions of six kinds,
    validated and trimmed to the difficulty budget (easy 5 / medium 10 / hard 15).

    Engine failures come back as 422 with a machine-readable code:
    `INSUFFICIENT_TEXT_STRUCTURE`, `INSUFFICIENT_FACTS`,
    `QUESTION_GENERATION_FAILED`, `INSUFFICIENT_QUESTIONS`.
    """
    text = (request.text or "").strip()
    if len(text) < MIN_TEXT_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Document text is too short to build a quiz (minimum {MIN_TEXT_LENGTH} characters)",
        )

    log.info(f"[QUIZ] difficulty={request.difficulty}, {len(text)} chars")
    try:
        quiz = generate_quiz(text, difficulty=request.difficulty, title=request.title)
    except QuizGenerationError as e:
        log.warning(f"[QUIZ] aborted: {e.code.value}: {e.message}")
        raise HTTPException(status_code=422, detail=e.to_dict())

    log.info(f"[QUIZ] {quiz.id}: {quiz.total_questions} questions, ~{quiz.estimated_time} min")
    return quiz


@router.post("/level", response_model=LevelResponse, response_model_by_alias=True)
def level(request: LevelRequest):
    """Description and question count for easy | medium | hard ('normal' is accepted as medium)."""
    try:
        return level_info(request.level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

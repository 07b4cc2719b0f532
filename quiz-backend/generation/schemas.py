"""
Pydantic schemas for the quiz generation pipeline.

Internal:   QuestionCandidate  — produced by generators, repaired by the validator
Output:     FinalQuestion, Quiz — the single externally visible artifact
API:        QuizRequest, LevelRequest, LevelResponse
"""

from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from generation.config import LEVEL_ALIASES

Difficulty = Literal["easy", "medium", "hard"]
QuestionType = Literal["single", "multiple"]
QuestionSource = Literal["factual", "definition", "comparison", "msq", "exam", "true_false"]

TRUE_FALSE_OPTIONS = ["True", "False"]


def _normalize_level(value):
    if isinstance(value, str):
        value = value.strip().lower()
        return LEVEL_ALIASES.get(value, value)
    return value


# ─── Internal pipeline types ───────────────────────────────────────────────────

class QuestionCandidate(BaseModel):
    """One generated question before selection."""
    prompt: str
    options: List[str]
    answer: Union[int, List[int]]
    type: QuestionType = "single"
    difficulty: Difficulty = "medium"
    source: QuestionSource = "factual"

    @property
    def answer_indices(self) -> List[int]:
        return list(self.answer) if isinstance(self.answer, list) else [self.answer]


# ─── Output types ──────────────────────────────────────────────────────────────

class FinalQuestion(BaseModel):
    """A validated question with its position in the quiz (1-based)."""
    id: int = Field(..., ge=1)
    question: str
    options: List[str] = Field(..., min_length=2, max_length=4)
    answer: Union[int, List[int]]
    type: QuestionType
    difficulty: Difficulty


class Quiz(BaseModel):
    """Complete generated quiz."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "quiz-1718000000000",
                "title": "Photosynthesis Quiz",
                "questions": [
                    {
                        "id": 1,
                        "question": "What is the best definition of photosynthesis?",
                        "options": [
                            "Converting light into chemical energy in plants",
                            "Chlorophyll is a common misconception",
                            "The release of heat during cellular respiration",
                            "The movement of water through the xylem",
                        ],
                        "answer": 0,
                        "type": "single",
                        "difficulty": "easy",
                    }
                ],
                "totalQuestions": 1,
                "estimatedTime": 2,
            }
        },
    )

    id: str
    title: str
    questions: List[FinalQuestion]
    total_questions: int = Field(..., alias="totalQuestions", ge=0)
    estimated_time: int = Field(..., alias="estimatedTime", ge=0)


# ─── API request/response ─────────────────────────────────────────────────────

class QuizRequest(BaseModel):
    """Cleaned document text plus the wanted difficulty."""
    text: str = Field(..., description="Cleaned UTF-8 text extracted from the uploaded document")
    difficulty: Difficulty = Field("medium", description="easy | medium | hard ('normal' = medium)")
    title: Optional[str] = Field(None, description="Optional quiz title; derived from the text if omitted")

    @field_validator("difficulty", mode="before")
    @classmethod
    def _alias_difficulty(cls, value):
        return _normalize_level(value)


class LevelRequest(BaseModel):
    level: str

    @field_validator("level", mode="before")
    @classmethod
    def _alias_level(cls, value):
        return _normalize_level(value)


class LevelResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    level: Difficulty
    description: str
    question_count: int = Field(..., alias="questionCount")

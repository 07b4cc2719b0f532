"""
Tagged failures of the quiz pipeline.

Each stage raises as soon as its minimum-output threshold is missed; none retries.
The router maps these to HTTP responses; no partial quiz is ever returned.
"""

import enum


class ErrorCode(str, enum.Enum):
    INSUFFICIENT_TEXT_STRUCTURE = "INSUFFICIENT_TEXT_STRUCTURE"
    INSUFFICIENT_FACTS = "INSUFFICIENT_FACTS"
    QUESTION_GENERATION_FAILED = "QUESTION_GENERATION_FAILED"
    INSUFFICIENT_QUESTIONS = "INSUFFICIENT_QUESTIONS"


class QuizGenerationError(Exception):
    """Base class: carries a machine-readable code and a human-readable message."""
    code: ErrorCode = ErrorCode.QUESTION_GENERATION_FAILED
    default_message = "Quiz generation failed"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code.value, "message": self.message}


class InsufficientStructureError(QuizGenerationError):
    code = ErrorCode.INSUFFICIENT_TEXT_STRUCTURE
    default_message = "The document does not have enough structured text to build a quiz"


class InsufficientFactsError(QuizGenerationError):
    code = ErrorCode.INSUFFICIENT_FACTS
    default_message = "Not enough factual statements were found in the document"


class QuestionGenerationFailedError(QuizGenerationError):
    code = ErrorCode.QUESTION_GENERATION_FAILED
    default_message = "No valid questions could be generated from the document"


class InsufficientQuestionsError(QuizGenerationError):
    code = ErrorCode.INSUFFICIENT_QUESTIONS
    default_message = "Too few valid questions could be generated from the document"

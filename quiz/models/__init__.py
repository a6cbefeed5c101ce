"""Quiz Models - Enums, Schemas e State."""

from .enums import PerformanceBand, QuizMode, QuizSource
from .schemas import (
    ANSWER_LETTERS,
    AnswerFeedback,
    GeneratedQuiz,
    GradingResult,
    QuestionResult,
    QuizOption,
    QuizQuestion,
)
from .state import DEFAULT_TTL, QuizSession

__all__ = [
    # Enums
    "QuizMode",
    "QuizSource",
    "PerformanceBand",
    # Schemas
    "ANSWER_LETTERS",
    "QuizOption",
    "QuizQuestion",
    "GeneratedQuiz",
    "QuestionResult",
    "GradingResult",
    "AnswerFeedback",
    # State
    "DEFAULT_TTL",
    "QuizSession",
]

"""Quiz Engines - Parser, correcao e ciclo de vida."""

from .answer_parser import looks_like_answer, parse_answers, parse_single_answer
from .lifecycle import QuizLifecycleController
from .scoring_engine import QuizGradingEngine, round_percentage

__all__ = [
    "parse_answers",
    "parse_single_answer",
    "looks_like_answer",
    "QuizGradingEngine",
    "round_percentage",
    "QuizLifecycleController",
]

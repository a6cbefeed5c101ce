"""Quiz LLM - Factory do Claude Agent SDK e gerador de quizzes."""

from .factory import LLMClientFactory
from .generator import QuizGenerator, fallback_quiz, parse_quiz_text

__all__ = ["LLMClientFactory", "QuizGenerator", "fallback_quiz", "parse_quiz_text"]

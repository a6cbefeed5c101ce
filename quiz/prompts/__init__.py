"""Quiz Prompts - Templates para LLM."""

from .templates import (
    DEFAULT_FALLBACK_SUBJECT,
    FALLBACK_QUIZZES,
    INTENT_PROMPT,
    INTENT_SYSTEM_PROMPT,
    QUIZ_GENERATION_PROMPT,
    QUIZ_SYSTEM_PROMPT,
)

__all__ = [
    "QUIZ_SYSTEM_PROMPT",
    "QUIZ_GENERATION_PROMPT",
    "INTENT_SYSTEM_PROMPT",
    "INTENT_PROMPT",
    "FALLBACK_QUIZZES",
    "DEFAULT_FALLBACK_SUBJECT",
]

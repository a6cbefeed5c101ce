"""Quiz Module - Geracao, sessoes e correcao de quizzes via WhatsApp.

Arquitetura:
- models/: Enums, Schemas Pydantic, QuizSession
- engine/: Parser de respostas, GradingEngine, LifecycleController
- llm/: LLMClientFactory, QuizGenerator
- storage/: QuizSessionStore (memoria, expiracao na leitura)
- prompts/: Templates de prompts e bancos de fallback
"""

from .engine import (
    QuizGradingEngine,
    QuizLifecycleController,
    looks_like_answer,
    parse_answers,
    parse_single_answer,
)
from .llm import LLMClientFactory, QuizGenerator, fallback_quiz
from .models import (
    AnswerFeedback,
    GeneratedQuiz,
    GradingResult,
    PerformanceBand,
    QuizMode,
    QuizOption,
    QuizQuestion,
    QuizSession,
    QuizSource,
)
from .storage import QuizSessionStore

__all__ = [
    # Models
    "QuizMode",
    "QuizSource",
    "PerformanceBand",
    "QuizOption",
    "QuizQuestion",
    "GeneratedQuiz",
    "GradingResult",
    "AnswerFeedback",
    "QuizSession",
    # Engines
    "parse_answers",
    "parse_single_answer",
    "looks_like_answer",
    "QuizGradingEngine",
    "QuizLifecycleController",
    # LLM
    "LLMClientFactory",
    "QuizGenerator",
    "fallback_quiz",
    # Storage
    "QuizSessionStore",
]

"""Quiz Enums - Modo de correcao e faixas de desempenho."""

from enum import Enum


class QuizMode(str, Enum):
    """Modelo de correcao de uma sessao."""

    ATOMIC = "atomic"  # Todas as respostas numa unica mensagem
    INCREMENTAL = "incremental"  # Uma resposta por mensagem, feedback imediato


class PerformanceBand(str, Enum):
    """Faixas usadas no texto de feedback do resultado."""

    EXCELLENT = "excellent"  # >= 80%
    GOOD = "good"  # 60-79%
    KEEP_TRYING = "keep_trying"  # < 60%


class QuizSource(str, Enum):
    """Origem das perguntas."""

    LLM = "llm"
    FALLBACK = "fallback"

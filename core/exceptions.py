"""Excecoes do bot - todas recuperaveis por request."""

from typing import Any


class MwalimuError(Exception):
    """Erro base do bot.

    Attributes:
        message: Mensagem legivel (para logs)
        details: Contexto adicional (owner, contagens, etc)
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# QUIZ
# =============================================================================


class QuizError(MwalimuError):
    """Erro no ciclo de vida do quiz."""


class NoActiveSessionError(QuizError):
    """Nenhum quiz ativo para o remetente."""

    def __init__(self, owner: str, message: str | None = None):
        super().__init__(
            message or f"Nenhum quiz ativo para {owner}",
            details={"owner": owner},
        )
        self.owner = owner


class SessionExpiredError(NoActiveSessionError):
    """Quiz existia mas passou do TTL."""

    def __init__(self, owner: str):
        super().__init__(owner, message=f"Quiz de {owner} expirou")


class FormatError(QuizError):
    """Resposta fora do formato ou com contagem errada."""

    def __init__(self, expected_count: int, received_count: int = 0, message: str | None = None):
        super().__init__(
            message
            or f"Esperado {expected_count} respostas, recebido {received_count}",
            details={"expected_count": expected_count, "received_count": received_count},
        )
        self.expected_count = expected_count
        self.received_count = received_count


class SingleAnswerExpectedError(FormatError):
    """Quiz incremental recebeu a lista completa de respostas."""

    def __init__(self, received_count: int, question_number: int):
        super().__init__(
            expected_count=1,
            received_count=received_count,
            message=f"Quiz incremental espera uma letra (questao {question_number})",
        )
        self.question_number = question_number


class GenerationFailure(QuizError):
    """Falha na geracao via LLM (sempre recuperada com quiz de fallback)."""


# =============================================================================
# DELIVERY / STORAGE
# =============================================================================


class DeliveryFailure(MwalimuError):
    """Mensagem nao entregue apos esgotar os retries."""

    def __init__(self, recipient: str, attempts: int, cause: Exception | None = None):
        super().__init__(
            f"Falha ao entregar mensagem para {recipient} apos {attempts} tentativas",
            details={"recipient": recipient, "attempts": attempts, "cause": str(cause) if cause else None},
        )
        self.recipient = recipient
        self.attempts = attempts


class RecordStoreError(MwalimuError):
    """Arquivo JSON de registros ilegivel ou corrompido."""


class InvalidInputError(MwalimuError):
    """Entrada invalida vinda do canal (remetente ou texto)."""

"""Quiz Session Store - Registro em memoria de sessoes por remetente."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from core.logger import get_logger

from ..models.state import QuizSession

logger = get_logger("quiz.session_store")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuizSessionStore:
    """Mapa owner -> QuizSession com expiracao na leitura.

    Nao persiste entre reinicios do processo. Sessoes expiradas continuam
    fisicamente no mapa ate a proxima leitura (ou purge_expired), mas nunca
    sao retornadas por get().

    Example:
        >>> store = QuizSessionStore()
        >>> store.put(session)
        >>> store.get("+254712345678")
    """

    def __init__(self, clock: Clock | None = None):
        """Inicializa store vazio.

        Args:
            clock: Funcao que retorna o instante atual (injetavel em testes)
        """
        self._sessions: dict[str, QuizSession] = {}
        self.clock: Clock = clock or utc_now

    def now(self) -> datetime:
        return self.clock()

    def put(self, session: QuizSession) -> QuizSession | None:
        """Salva sessao, substituindo a anterior do mesmo owner.

        Returns:
            Sessao substituida (se havia uma)
        """
        previous = self._sessions.get(session.owner)
        self._sessions[session.owner] = session
        logger.debug(f"Sessao salva: {session.owner} ({session.subject})")
        return previous

    def peek(self, owner: str) -> QuizSession | None:
        """Retorna o registro bruto, expirado ou nao."""
        return self._sessions.get(owner)

    def get(self, owner: str) -> QuizSession | None:
        """Retorna sessao ativa; sessao expirada e removida e retorna None."""
        session = self._sessions.get(owner)
        if session is None:
            return None

        if session.is_expired(self.now()):
            del self._sessions[owner]
            logger.info(f"Sessao expirada removida: {owner}")
            return None

        return session

    def delete(self, owner: str) -> bool:
        """Remove sessao do owner.

        Returns:
            True se havia sessao
        """
        removed = self._sessions.pop(owner, None) is not None
        if removed:
            logger.debug(f"Sessao removida: {owner}")
        return removed

    def purge_expired(self) -> int:
        """Remove todas as sessoes expiradas. Retorna quantas removeu."""
        now = self.now()
        expired = [owner for owner, s in self._sessions.items() if s.is_expired(now)]
        for owner in expired:
            del self._sessions[owner]
        if expired:
            logger.info(f"{len(expired)} sessoes expiradas removidas")
        return len(expired)

    def active_count(self) -> int:
        """Numero de sessoes ainda validas (sem remover nada)."""
        now = self.now()
        return sum(1 for s in self._sessions.values() if not s.is_expired(now))

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, owner: object) -> bool:
        return isinstance(owner, str) and self.get(owner) is not None

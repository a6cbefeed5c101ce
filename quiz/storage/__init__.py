"""Quiz Storage - Sessoes em memoria."""

from .session_store import QuizSessionStore, utc_now

__all__ = ["QuizSessionStore", "utc_now"]

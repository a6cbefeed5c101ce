"""Logger centralizado do bot."""

from __future__ import annotations

import logging
import sys

LOGGER_NAMESPACE = "mwalimu"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configura o logger raiz do namespace (idempotente).

    Args:
        level: Nome do nivel (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Logger raiz do namespace
    """
    global _configured

    root = logging.getLogger(LOGGER_NAMESPACE)
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        resolved = logging.INFO
    root.setLevel(resolved)

    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        _configured = True

    return root


def get_logger(name: str) -> logging.Logger:
    """Retorna logger filho do namespace (ex: mwalimu.quiz)."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def summarize_text(text: str | None, max_len: int = 80) -> str:
    """Resumo em uma linha para logs."""
    if not text:
        return ""
    cleaned = " ".join(str(text).split())
    if len(cleaned) <= max_len:
        return cleaned
    return f"{cleaned[:max_len]}…"

"""Rate limiting do webhook via slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import get_config

RATE_LIMITS = {
    "webhook": get_config().webhook_rate_limit,
    "api": "30/minute",
}

_limiter: Limiter | None = None


def get_limiter() -> Limiter:
    """Limiter compartilhado (chave = IP de origem)."""
    global _limiter
    if _limiter is None:
        _limiter = Limiter(key_func=get_remote_address)
    return _limiter

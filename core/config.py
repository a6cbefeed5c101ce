"""Configuracao centralizada do bot (variaveis de ambiente + .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .logger import get_logger

logger = get_logger("config")

QUIZ_MODES = ("atomic", "incremental")
DEFAULT_TWILIO_WHATSAPP_NUMBER = "whatsapp:+14155238886"


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value not in (None, "") else default


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} invalido, usando {default}")
        return default
    if value < minimum:
        logger.warning(f"{name}={value} abaixo do minimo {minimum}, usando {default}")
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} invalido, usando {default}")
        return default
    return value if value > 0 else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class BotConfig:
    """Configuracao do Mwalimu Bot.

    Attributes:
        data_dir: Diretorio dos arquivos JSON (students/teachers/parents)
        quiz_ttl_minutes: Validade de um quiz a partir da criacao
        quiz_question_count: Numero de perguntas por quiz
        quiz_mode: "atomic" (todas as respostas de uma vez) ou "incremental"
        llm_enabled: Se False, usa apenas fallbacks deterministicos
        llm_model: Modelo Claude (haiku, sonnet, opus)
        llm_timeout_seconds: Timeout da geracao de quiz
        intent_timeout_seconds: Timeout da classificacao de intencao
        twilio_*: Credenciais e numero remetente do WhatsApp
        delivery_retries: Retries alem da primeira tentativa de envio
        delivery_backoff_seconds: Base do backoff exponencial
        webhook_rate_limit: Limite slowapi do webhook
    """

    data_dir: Path = field(default_factory=lambda: Path.cwd() / "data")
    quiz_ttl_minutes: int = 30
    quiz_question_count: int = 3
    quiz_mode: str = "atomic"
    llm_enabled: bool = True
    llm_model: str = "haiku"
    llm_timeout_seconds: float = 20.0
    intent_timeout_seconds: float = 10.0
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_whatsapp_number: str = DEFAULT_TWILIO_WHATSAPP_NUMBER
    delivery_retries: int = 2
    delivery_backoff_seconds: float = 0.5
    webhook_rate_limit: str = "60/minute"
    log_level: str = "INFO"
    environment: str = "development"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Cria configuracao a partir das variaveis de ambiente."""
        quiz_mode = _env_str("QUIZ_MODE", "atomic").lower()
        if quiz_mode not in QUIZ_MODES:
            logger.warning(f"QUIZ_MODE={quiz_mode!r} invalido, usando 'atomic'")
            quiz_mode = "atomic"

        return cls(
            data_dir=Path(_env_str("MWALIMU_DATA_DIR", str(Path.cwd() / "data"))),
            quiz_ttl_minutes=_env_int("QUIZ_TTL_MINUTES", 30, minimum=1),
            quiz_question_count=_env_int("QUIZ_QUESTION_COUNT", 3, minimum=1),
            quiz_mode=quiz_mode,
            llm_enabled=_env_bool("LLM_ENABLED", True),
            llm_model=_env_str("LLM_MODEL", "haiku").lower(),
            llm_timeout_seconds=_env_float("LLM_TIMEOUT_SECONDS", 20.0),
            intent_timeout_seconds=_env_float("INTENT_TIMEOUT_SECONDS", 10.0),
            twilio_account_sid=_env_str("TWILIO_ACCOUNT_SID", ""),
            twilio_auth_token=_env_str("TWILIO_AUTH_TOKEN", ""),
            twilio_whatsapp_number=_env_str(
                "TWILIO_WHATSAPP_NUMBER", DEFAULT_TWILIO_WHATSAPP_NUMBER
            ),
            delivery_retries=_env_int("DELIVERY_RETRIES", 2),
            delivery_backoff_seconds=_env_float("DELIVERY_BACKOFF_SECONDS", 0.5),
            webhook_rate_limit=_env_str("WEBHOOK_RATE_LIMIT", "60/minute"),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            environment=_env_str("ENVIRONMENT", "development"),
            port=_env_int("PORT", 5000, minimum=1),
        )

    @property
    def twilio_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token)

    def to_dict(self) -> dict[str, Any]:
        """Dict agrupado por secao (segredos mascarados)."""
        return {
            "storage": {"data_dir": str(self.data_dir)},
            "quiz": {
                "ttl_minutes": self.quiz_ttl_minutes,
                "question_count": self.quiz_question_count,
                "mode": self.quiz_mode,
            },
            "llm": {
                "enabled": self.llm_enabled,
                "model": self.llm_model,
                "timeout_seconds": self.llm_timeout_seconds,
                "intent_timeout_seconds": self.intent_timeout_seconds,
            },
            "delivery": {
                "twilio_configured": self.twilio_configured,
                "from_number": self.twilio_whatsapp_number,
                "retries": self.delivery_retries,
                "backoff_seconds": self.delivery_backoff_seconds,
            },
            "server": {
                "environment": self.environment,
                "port": self.port,
                "log_level": self.log_level,
                "webhook_rate_limit": self.webhook_rate_limit,
            },
        }


# =============================================================================
# SINGLETON
# =============================================================================

_config: BotConfig | None = None


def get_config() -> BotConfig:
    """Retorna configuracao global (carrega .env na primeira chamada)."""
    global _config
    if _config is None:
        load_dotenv()
        _config = BotConfig.from_env()
    return _config


def reload_config() -> BotConfig:
    """Relê o ambiente e substitui a configuracao global."""
    global _config
    load_dotenv(override=False)
    _config = BotConfig.from_env()
    return _config

"""Core module - configuracao, logging, excecoes e rate limiting."""

from .config import BotConfig, get_config, reload_config
from .exceptions import (
    DeliveryFailure,
    FormatError,
    GenerationFailure,
    InvalidInputError,
    MwalimuError,
    NoActiveSessionError,
    QuizError,
    RecordStoreError,
    SessionExpiredError,
)
from .logger import get_logger, setup_logging

__all__ = [
    # Config
    "BotConfig",
    "get_config",
    "reload_config",
    # Exceptions
    "MwalimuError",
    "QuizError",
    "NoActiveSessionError",
    "SessionExpiredError",
    "FormatError",
    "GenerationFailure",
    "InvalidInputError",
    "DeliveryFailure",
    "RecordStoreError",
    # Logging
    "get_logger",
    "setup_logging",
]

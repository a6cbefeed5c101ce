"""Estado compartilhado do processo - instancias criadas sob demanda."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from agents.intent_classifier import IntentClassifier
from agents.message_handler import MessageHandler
from core.config import BotConfig, get_config
from core.logger import get_logger
from messaging.whatsapp import WhatsAppSender
from quiz.engine.lifecycle import QuizLifecycleController
from quiz.llm.generator import QuizGenerator
from quiz.models import QuizMode
from quiz.storage.session_store import QuizSessionStore
from records.database import StudentDatabase
from records.registration import RegistrationService

logger = get_logger("app_state")

# =============================================================================
# INSTANCIAS GLOBAIS
# =============================================================================

session_store: Optional[QuizSessionStore] = None
controller: Optional[QuizLifecycleController] = None
database: Optional[StudentDatabase] = None
registration: Optional[RegistrationService] = None
handler: Optional[MessageHandler] = None
sender: Optional[WhatsAppSender] = None


def get_session_store() -> QuizSessionStore:
    global session_store
    if session_store is None:
        session_store = QuizSessionStore()
    return session_store


def get_controller() -> QuizLifecycleController:
    global controller
    if controller is None:
        config = get_config()
        controller = QuizLifecycleController(
            get_session_store(),
            ttl=timedelta(minutes=config.quiz_ttl_minutes),
            default_mode=QuizMode(config.quiz_mode),
        )
    return controller


def get_database() -> StudentDatabase:
    global database
    if database is None:
        database = StudentDatabase(get_config().data_dir)
        logger.info(f"Registros em {database.data_dir}")
    return database


def get_registration() -> RegistrationService:
    global registration
    if registration is None:
        registration = RegistrationService(get_database())
    return registration


def build_handler(config: BotConfig) -> MessageHandler:
    """Monta o MessageHandler com as dependencias globais."""
    return MessageHandler(
        controller=get_controller(),
        generator=QuizGenerator(
            timeout=config.llm_timeout_seconds,
            enabled=config.llm_enabled,
            model=config.llm_model,
        ),
        classifier=IntentClassifier(
            timeout=config.intent_timeout_seconds,
            enabled=config.llm_enabled,
            model=config.llm_model,
        ),
        database=get_database(),
        registration=get_registration(),
        question_count=config.quiz_question_count,
        quiz_mode=QuizMode(config.quiz_mode),
    )


def get_handler() -> MessageHandler:
    global handler
    if handler is None:
        handler = build_handler(get_config())
    return handler


def get_sender() -> WhatsAppSender:
    global sender
    if sender is None:
        sender = WhatsAppSender.from_config(get_config())
    return sender


def reset_state() -> None:
    """Descarta todas as instancias (proxima chamada recria a partir da config)."""
    global session_store, controller, database, registration, handler, sender
    session_store = None
    controller = None
    database = None
    registration = None
    handler = None
    sender = None

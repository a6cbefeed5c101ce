# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Relogio controlavel, quiz de exemplo, registros em diretorio temporario
# =============================================================================

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from quiz.models import GeneratedQuiz, QuizOption, QuizQuestion, QuizSource

# =============================================================================
# RELOGIO
# =============================================================================


class FakeClock:
    """Relogio manual para testes de expiracao."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# QUIZ
# =============================================================================


def make_quiz(subject: str = "Mathematics", key: list[str] | None = None) -> GeneratedQuiz:
    key = key or ["A", "C", "B"]
    questions = [
        QuizQuestion(
            index=i,
            text=f"Question text {i}?",
            options=[QuizOption(label=label, text=f"option {label}") for label in "ABCD"],
        )
        for i in range(1, len(key) + 1)
    ]
    return GeneratedQuiz(
        subject=subject, questions=questions, answer_key=key, source=QuizSource.FALLBACK
    )


@pytest.fixture
def quiz_factory():
    """Cria quizzes com materia e gabarito arbitrarios."""
    return make_quiz


@pytest.fixture
def sample_quiz() -> GeneratedQuiz:
    """Quiz de 3 questoes com gabarito A C B."""
    return make_quiz()


@pytest.fixture
def store(clock):
    from quiz.storage.session_store import QuizSessionStore

    return QuizSessionStore(clock=clock)


@pytest.fixture
def controller(store):
    from quiz.engine.lifecycle import QuizLifecycleController

    return QuizLifecycleController(store)


@pytest.fixture
def incremental_controller(store):
    from quiz.engine.lifecycle import QuizLifecycleController
    from quiz.models import QuizMode

    return QuizLifecycleController(store, default_mode=QuizMode.INCREMENTAL)


# =============================================================================
# REGISTROS
# =============================================================================


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "records"
    path.mkdir()
    return path


@pytest.fixture
def database(data_dir):
    from records.database import StudentDatabase

    return StudentDatabase(data_dir)


@pytest.fixture
def registration(database):
    from records.registration import RegistrationService

    return RegistrationService(database)


@pytest.fixture
def registered_student(registration):
    """Amina Hassan, Form 2A, telefone +254712345678."""
    result = registration.register_student(
        "Amina Hassan", "+254712345678", "Form 2A", "+254700000001"
    )
    return result.record


# =============================================================================
# HANDLER
# =============================================================================


@pytest.fixture
def fallback_generator():
    from quiz.llm.generator import QuizGenerator

    return QuizGenerator(llm=AsyncMock(), enabled=False)


@pytest.fixture
def rules_classifier():
    from agents.intent_classifier import IntentClassifier

    return IntentClassifier(llm=AsyncMock(), enabled=False)


@pytest.fixture
def handler(controller, fallback_generator, rules_classifier, database, registration):
    """MessageHandler sem LLM (regras + quiz fixo)."""
    from agents.message_handler import MessageHandler

    return MessageHandler(
        controller=controller,
        generator=fallback_generator,
        classifier=rules_classifier,
        database=database,
        registration=registration,
    )


# =============================================================================
# FIXTURES DO FASTAPI
# =============================================================================


@pytest.fixture
def mock_sender():
    """WhatsAppSender com send() mockado."""
    sender = MagicMock()
    sender.send = AsyncMock(return_value="SM123")
    return sender


@pytest.fixture
def client(mock_sender):
    """Cliente de teste FastAPI com estado limpo."""
    from fastapi.testclient import TestClient

    import app_state
    from core.config import reload_config
    from core.rate_limiter import get_limiter

    reload_config()
    app_state.reset_state()
    app_state.sender = mock_sender
    get_limiter().reset()

    from server import app

    with TestClient(app) as test_client:
        yield test_client

    app_state.reset_state()

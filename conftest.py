# =============================================================================
# CONFTEST - Pytest Fixtures Globais
# =============================================================================
# Ambiente isolado: sem Twilio, sem LLM, dados em diretorio temporario
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Adicionar root ao path
sys.path.insert(0, str(Path(__file__).parent))


# =============================================================================
# FIXTURES DE AMBIENTE
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_env(tmp_path: Path):
    """Configura variaveis de ambiente para testes."""
    env_vars = {
        "MWALIMU_DATA_DIR": str(tmp_path / "data"),
        "LLM_ENABLED": "false",
        "TWILIO_ACCOUNT_SID": "",
        "TWILIO_AUTH_TOKEN": "",
        "QUIZ_MODE": "atomic",
        "QUIZ_QUESTION_COUNT": "3",
        "DELIVERY_BACKOFF_SECONDS": "0.01",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "ERROR",
    }
    with patch.dict(os.environ, env_vars):
        yield


@pytest.fixture
def capture_logs(caplog):
    """Captura logs durante testes."""
    import logging

    caplog.set_level(logging.DEBUG, logger="mwalimu")
    return caplog

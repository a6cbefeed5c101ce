# =============================================================================
# TESTES - WhatsApp Sender
# =============================================================================
# Normalizacao de numeros, dry-run, retry e DeliveryFailure
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from core.exceptions import DeliveryFailure


class TestNormalizeWhatsappNumber:
    """Testes para normalize_whatsapp_number."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("+254712345678", "whatsapp:+254712345678"),
            ("whatsapp:+254712345678", "whatsapp:+254712345678"),
            ("254 712-345-678", "whatsapp:+254712345678"),
            ("web-user", None),
            ("", None),
            (None, None),
        ],
    )
    def test_formats(self, raw, expected):
        from messaging.whatsapp import normalize_whatsapp_number

        assert normalize_whatsapp_number(raw) == expected


class TestWhatsAppSender:
    """Testes para WhatsAppSender.send."""

    def _client(self, side_effect=None):
        client = MagicMock()
        client.messages.create.side_effect = side_effect
        client.messages.create.return_value = SimpleNamespace(sid="SM123")
        return client

    @pytest.mark.asyncio
    async def test_send_success(self):
        """Envia com from_/to/body no formato Twilio."""
        from messaging.whatsapp import WhatsAppSender

        client = self._client()
        sender = WhatsAppSender(client=client, backoff=0.01)

        sid = await sender.send("+254712345678", "Hello!")

        assert sid == "SM123"
        client.messages.create.assert_called_once_with(
            from_="whatsapp:+14155238886", to="whatsapp:+254712345678", body="Hello!"
        )

    @pytest.mark.asyncio
    async def test_retry_then_success(self, capture_logs):
        """Falha transitoria e recuperada na segunda tentativa."""
        from messaging.whatsapp import WhatsAppSender

        client = self._client(side_effect=[ConnectionError("reset"), SimpleNamespace(sid="SM456")])
        sender = WhatsAppSender(client=client, retries=2, backoff=0.01)

        assert await sender.send("+254712345678", "Hi") == "SM456"
        assert client.messages.create.call_count == 2
        assert "Retentativa 2/3" in capture_logs.text

    @pytest.mark.asyncio
    async def test_retries_exhausted(self):
        """Apos 1 + retries tentativas levanta DeliveryFailure."""
        from messaging.whatsapp import WhatsAppSender

        client = self._client(side_effect=ConnectionError("down"))
        sender = WhatsAppSender(client=client, retries=2, backoff=0.01)

        with pytest.raises(DeliveryFailure) as exc_info:
            await sender.send("+254712345678", "Hi")

        assert client.messages.create.call_count == 3
        assert exc_info.value.details["attempts"] == 3

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        """Erro 4xx do Twilio (numero invalido) falha na primeira tentativa."""
        from twilio.base.exceptions import TwilioRestException

        from messaging.whatsapp import WhatsAppSender

        error = TwilioRestException(400, "/Messages.json", msg="Invalid To number", code=21211)
        client = self._client(side_effect=error)
        sender = WhatsAppSender(client=client, retries=2, backoff=0.01)

        with pytest.raises(DeliveryFailure) as exc_info:
            await sender.send("+254712345678", "Hi")

        assert client.messages.create.call_count == 1
        assert exc_info.value.details["attempts"] == 1
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_server_error_retried(self):
        """5xx e 429 continuam sendo tentados de novo."""
        from twilio.base.exceptions import TwilioRestException

        from messaging.whatsapp import WhatsAppSender

        client = self._client(
            side_effect=[
                TwilioRestException(503, "/Messages.json", msg="Unavailable"),
                TwilioRestException(429, "/Messages.json", msg="Too Many Requests"),
                SimpleNamespace(sid="SM789"),
            ]
        )
        sender = WhatsAppSender(client=client, retries=2, backoff=0.01)

        assert await sender.send("+254712345678", "Hi") == "SM789"
        assert client.messages.create.call_count == 3

    @pytest.mark.asyncio
    async def test_invalid_recipient(self):
        """Destinatario invalido nao chama o Twilio."""
        from messaging.whatsapp import WhatsAppSender

        client = self._client()
        sender = WhatsAppSender(client=client)

        with pytest.raises(DeliveryFailure):
            await sender.send("web-user", "Hi")
        client.messages.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_dry_run(self, capture_logs):
        """Sem cliente, apenas registra no log."""
        from messaging.whatsapp import WhatsAppSender

        sender = WhatsAppSender()

        assert sender.dry_run is True
        assert await sender.send("+254712345678", "Hello!") is None
        assert "DRY-RUN" in capture_logs.text

    def test_from_config_without_credentials(self):
        """Config sem credenciais gera sender em dry-run."""
        from core.config import BotConfig
        from messaging.whatsapp import WhatsAppSender

        sender = WhatsAppSender.from_config(BotConfig(delivery_retries=4))

        assert sender.dry_run is True
        assert sender.retries == 4

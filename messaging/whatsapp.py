"""WhatsApp Sender - Envio via Twilio com retry exponencial."""

from __future__ import annotations

import asyncio
import re
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from core.config import DEFAULT_TWILIO_WHATSAPP_NUMBER, BotConfig
from core.exceptions import DeliveryFailure
from core.logger import get_logger, summarize_text

logger = get_logger("messaging.whatsapp")


def normalize_whatsapp_number(raw: str | None) -> str | None:
    """Converte numero para o formato Twilio "whatsapp:+<digitos>".

    Retorna None para entradas que nao sao numeros.
    """
    if not raw or not raw.strip():
        return None
    value = raw.strip()
    if value.startswith("whatsapp:"):
        return value
    if value.startswith("+"):
        return f"whatsapp:{value}"
    digits = re.sub(r"[\s-]", "", value)
    if digits.isdigit():
        return f"whatsapp:+{digits}"
    return None


def is_retryable(error: BaseException) -> bool:
    """Erros 4xx do Twilio (exceto 429) sao permanentes: numero invalido, auth, etc."""
    if isinstance(error, TwilioRestException):
        status = error.status or 0
        return not (400 <= status < 500) or status == 429
    return True


class WhatsAppSender:
    """Entrega de mensagens de texto pelo WhatsApp (Twilio REST API).

    Tenta 1 + `retries` vezes com espera `backoff * 2^tentativa` entre
    elas. Sem credenciais Twilio, opera em modo dry-run: apenas registra a
    mensagem no log.

    Example:
        >>> sender = WhatsAppSender.from_config(get_config())
        >>> await sender.send("+254712345678", "Hello!")
    """

    def __init__(
        self,
        client: Any | None = None,
        from_number: str = DEFAULT_TWILIO_WHATSAPP_NUMBER,
        retries: int = 2,
        backoff: float = 0.5,
    ):
        self.client = client
        self.from_number = normalize_whatsapp_number(from_number) or DEFAULT_TWILIO_WHATSAPP_NUMBER
        self.retries = max(retries, 0)
        self.backoff = backoff

    @classmethod
    def from_config(cls, config: BotConfig) -> "WhatsAppSender":
        client = None
        if config.twilio_configured:
            client = Client(config.twilio_account_sid, config.twilio_auth_token)
        else:
            logger.warning("Twilio nao configurado: mensagens apenas no log (dry-run)")
        return cls(
            client=client,
            from_number=config.twilio_whatsapp_number,
            retries=config.delivery_retries,
            backoff=config.delivery_backoff_seconds,
        )

    @property
    def dry_run(self) -> bool:
        return self.client is None

    def _create_message(self, to: str, body: str) -> Any:
        return self.client.messages.create(from_=self.from_number, to=to, body=body)

    async def send(self, recipient: str, body: str) -> str | None:
        """Envia mensagem e retorna o SID do Twilio (None em dry-run).

        Raises:
            DeliveryFailure: Destinatario invalido, erro 4xx do Twilio ou retries esgotados
        """
        to = normalize_whatsapp_number(recipient)
        if to is None:
            raise DeliveryFailure(recipient, attempts=0)

        if self.dry_run:
            logger.info(f"[DRY-RUN] to={to}: {summarize_text(body)}")
            return None

        attempts = self.retries + 1
        attempt_number = 0
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(attempts),
                wait=wait_exponential(multiplier=self.backoff),
                retry=retry_if_exception(is_retryable),
            ):
                with attempt:
                    attempt_number = attempt.retry_state.attempt_number
                    if attempt_number > 1:
                        logger.warning(f"[SEND] Retentativa {attempt_number}/{attempts} para {to}")
                    message = await asyncio.to_thread(self._create_message, to, body)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(f"[SEND] Falha para {to} apos {attempts} tentativas: {cause}")
            raise DeliveryFailure(to, attempts=attempts, cause=cause) from cause
        except TwilioRestException as e:
            logger.error(f"[SEND] Erro permanente para {to} (HTTP {e.status}): {e.msg}")
            raise DeliveryFailure(to, attempts=attempt_number, cause=e) from e

        logger.info(f"[SEND] sid={message.sid} to={to} len={len(body)}")
        return message.sid

"""WhatsApp webhook - Entrada de mensagens do Twilio."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import PlainTextResponse

import app_state
from agents.message_handler import MessageHandler
from agents.replies import ERROR_APOLOGY
from core.exceptions import DeliveryFailure
from core.logger import get_logger, summarize_text
from core.rate_limiter import RATE_LIMITS, get_limiter
from messaging.whatsapp import WhatsAppSender

router = APIRouter(tags=["WhatsApp"])
limiter = get_limiter()
logger = get_logger("webhook")


@router.post("/webhook/whatsapp", response_class=PlainTextResponse)
@limiter.limit(RATE_LIMITS["webhook"])
async def whatsapp_webhook(
    request: Request,
    body: str = Form("", alias="Body"),
    sender_id: str = Form(..., alias="From"),
    profile_name: str = Form("User", alias="ProfileName"),
    handler: MessageHandler = Depends(app_state.get_handler),
    sender: WhatsAppSender = Depends(app_state.get_sender),
):
    """Processa mensagem recebida e responde pelo WhatsApp.

    Sempre 200 para o Twilio, mesmo se a entrega da resposta falhar.
    500 apenas quando o processamento da mensagem quebra.
    """
    logger.info(f"Mensagem de {profile_name} ({sender_id}): {summarize_text(body)!r}")

    try:
        reply = await handler.handle_inbound_message(sender_id, body)
    except Exception as e:
        logger.exception(f"Erro ao processar mensagem de {sender_id}: {e}")
        try:
            await sender.send(sender_id, ERROR_APOLOGY)
        except DeliveryFailure as delivery_error:
            logger.error(f"Falha ao enviar pedido de desculpas: {delivery_error.message}")
        return PlainTextResponse("Error", status_code=500)

    try:
        await sender.send(sender_id, reply)
    except DeliveryFailure as e:
        logger.error(f"Resposta nao entregue: {e.message}")

    return PlainTextResponse("OK")

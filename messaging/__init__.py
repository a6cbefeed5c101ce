"""Messaging - Entrega de mensagens pelo WhatsApp."""

from .whatsapp import WhatsAppSender, normalize_whatsapp_number

__all__ = ["WhatsAppSender", "normalize_whatsapp_number"]

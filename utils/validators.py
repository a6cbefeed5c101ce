"""Validadores de entrada do canal WhatsApp."""

import re

from core.exceptions import InvalidInputError

MAX_MESSAGE_LENGTH = 4096

# Formato Kenyan: +254 seguido de 9 digitos
KENYAN_PHONE_PATTERN = re.compile(r"^\+?254\d{9}$")


def normalize_phone(sender: str) -> str:
    """Normaliza identidade do remetente para "+<digitos>".

    Aceita "whatsapp:+254712345678", "254712345678", "+254 712 345 678".
    Identidades sem digitos (ex: "web-user") sao mantidas como estao.

    Raises:
        InvalidInputError: Remetente vazio
    """
    if not sender or not sender.strip():
        raise InvalidInputError(message="Remetente nao pode ser vazio")

    value = sender.strip()
    if value.lower().startswith("whatsapp:"):
        value = value[len("whatsapp:"):]

    digits = re.sub(r"[^\d]", "", value)
    if not digits or re.search(r"[A-Za-z]", value):
        return value
    return f"+{digits}"


def is_kenyan_phone(phone: str) -> bool:
    return bool(phone) and bool(KENYAN_PHONE_PATTERN.match(phone.replace(" ", "")))


def validate_message_text(text: str | None) -> str:
    """Valida texto recebido e retorna a versao sem espacos nas pontas.

    Raises:
        InvalidInputError: Texto vazio ou maior que MAX_MESSAGE_LENGTH
    """
    if text is None or not text.strip():
        raise InvalidInputError(message="Mensagem nao pode ser vazia")

    if len(text) > MAX_MESSAGE_LENGTH:
        raise InvalidInputError(
            message=f"Mensagem excede {MAX_MESSAGE_LENGTH} caracteres",
            details={"length": len(text)},
        )
    return text.strip()

"""Answer Parser - Extrai letras de resposta de texto livre."""

import re

from ..models.schemas import ANSWER_LETTERS

MAX_BARE_LETTERS = 5

# "1A 2C 3B", "1-A, 2-C", "1A2C3B", "1) b 2: c"
NUMBERED_PATTERN = re.compile(r"(?<!\d)\d+\s*[-:.)]?\s*([A-D])(?![A-Z])", re.IGNORECASE)

# Uma letra (opcionalmente numerada) por mensagem: "b", "2 - C", "A."
SINGLE_PATTERN = re.compile(r"^\s*(?:\d+\s*[-:.)]?\s*)?([A-D])\s*[.!]?\s*$", re.IGNORECASE)

# Mensagem composta apenas de pares numero-letra
NUMBERED_SUBMISSION_PATTERN = re.compile(
    r"^(?:\d+\s*[-:.)]?\s*[A-D](?![A-Z])[\s,;]*)+$", re.IGNORECASE
)


def _bare_letters_pattern(max_letters: int) -> re.Pattern[str]:
    return re.compile(
        rf"^[A-D](?:[\s,]+[A-D]){{1,{max_letters - 1}}}$",
        re.IGNORECASE,
    )


def parse_answers(text: str | None, expected_count: int | None = None) -> list[str]:
    """Extrai a sequencia ordenada de respostas de uma mensagem.

    Formatos aceitos, nesta prioridade:
        1. Numerado: "1A 2C 3B", "1-A, 2-C" (numero descartado)
        2. Letras soltas: "A C B", "a, c, b" (2 a 5 letras, a mensagem inteira)

    Args:
        text: Mensagem recebida
        expected_count: Numero de questoes do quiz. Acima de 5, amplia o
            limite do formato de letras soltas.

    Returns:
        Letras em maiusculo, na ordem em que aparecem. Lista vazia quando a
        mensagem nao e uma submissao reconhecivel.
    """
    if not text:
        return []

    numbered = NUMBERED_PATTERN.findall(text)
    if numbered:
        return [letter.upper() for letter in numbered]

    max_letters = max(MAX_BARE_LETTERS, expected_count or 0)
    candidate = text.strip().rstrip(".!").strip()
    if _bare_letters_pattern(max_letters).match(candidate):
        return [letter.upper() for letter in re.findall(r"[A-D]", candidate, re.IGNORECASE)]

    return []


def parse_single_answer(text: str | None) -> str | None:
    """Extrai uma unica letra (modo incremental), ou None."""
    if not text:
        return None
    match = SINGLE_PATTERN.match(text)
    if not match:
        return None
    letter = match.group(1).upper()
    return letter if letter in ANSWER_LETTERS else None


def looks_like_answer(text: str | None, expected_count: int | None = None) -> bool:
    """True se a mensagem inteira e uma submissao de respostas.

    Mais estrito que parse_answers: "Form 2A" dentro de uma frase nao conta.
    """
    if not text:
        return False
    candidate = text.strip().rstrip(".!").strip()
    if NUMBERED_SUBMISSION_PATTERN.match(candidate):
        return True
    max_letters = max(MAX_BARE_LETTERS, expected_count or 0)
    return bool(_bare_letters_pattern(max_letters).match(candidate))

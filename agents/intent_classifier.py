"""Intent Classifier - Classificacao de mensagens via Claude com fallback por regras."""

from __future__ import annotations

import asyncio
import re
from enum import Enum

from core.logger import get_logger, summarize_text
from quiz.engine.answer_parser import looks_like_answer
from quiz.llm.factory import LLMClientFactory
from quiz.llm.generator import TextCompletion
from quiz.prompts import INTENT_PROMPT

logger = get_logger("intent_classifier")


class IntentLabel(str, Enum):
    REGISTER_STUDENT = "REGISTER_STUDENT"
    REGISTER_TEACHER = "REGISTER_TEACHER"
    REGISTER_PARENT = "REGISTER_PARENT"
    CHECK_PERFORMANCE = "CHECK_PERFORMANCE"
    QUIZ_REQUEST = "QUIZ_REQUEST"
    QUIZ_ANSWER = "QUIZ_ANSWER"
    RECORD_GRADES = "RECORD_GRADES"
    CLASS_STATS = "CLASS_STATS"
    HELP = "HELP"


LABEL_PATTERN = re.compile(r"\b(" + "|".join(label.value for label in IntentLabel) + r")\b")

# Ordem importa: primeira palavra-chave encontrada vence
KEYWORD_INTENTS: list[tuple[tuple[str, ...], IntentLabel]] = [
    (("register student",), IntentLabel.REGISTER_STUDENT),
    (("register teacher",), IntentLabel.REGISTER_TEACHER),
    (("register parent",), IntentLabel.REGISTER_PARENT),
    (("check", "performance"), IntentLabel.CHECK_PERFORMANCE),
    (("quiz",), IntentLabel.QUIZ_REQUEST),
    (("record grade",), IntentLabel.RECORD_GRADES),
    (("class stat",), IntentLabel.CLASS_STATS),
]


def fallback_intent(text: str | None) -> IntentLabel:
    """Classificacao deterministica: respostas de quiz primeiro, depois palavras-chave."""
    if not text:
        return IntentLabel.HELP

    if looks_like_answer(text):
        return IntentLabel.QUIZ_ANSWER

    message = " ".join(text.lower().split())
    for keywords, label in KEYWORD_INTENTS:
        if any(keyword in message for keyword in keywords):
            return label
    return IntentLabel.HELP


def parse_intent_label(response: str | None) -> IntentLabel | None:
    """Primeiro rotulo conhecido na resposta do modelo, ou None."""
    if not response:
        return None
    match = LABEL_PATTERN.search(response.upper())
    return IntentLabel(match.group(1)) if match else None


class IntentClassifier:
    """Classificador de intencao.

    Usa o modelo com timeout curto; resposta sem rotulo conhecido, timeout
    ou erro do SDK caem em fallback_intent().

    Example:
        >>> classifier = IntentClassifier(timeout=10.0)
        >>> await classifier.classify("Quiz me on Science")
        <IntentLabel.QUIZ_REQUEST: 'QUIZ_REQUEST'>
    """

    def __init__(
        self,
        llm: TextCompletion | None = None,
        timeout: float = 10.0,
        enabled: bool = True,
        model: str = LLMClientFactory.DEFAULT_MODEL,
    ):
        self.timeout = timeout
        self.enabled = enabled
        self._llm = llm or self._default_llm(model)

    @staticmethod
    def _default_llm(model: str) -> TextCompletion:
        options = LLMClientFactory.create_intent_options(model)

        async def complete(prompt: str) -> str:
            return await LLMClientFactory.complete_text(prompt, options)

        return complete

    async def classify(self, text: str) -> IntentLabel:
        if not self.enabled:
            return fallback_intent(text)

        try:
            response = await asyncio.wait_for(
                self._llm(INTENT_PROMPT.format(message=text)), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Timeout ({self.timeout}s) na classificacao, usando regras")
            return fallback_intent(text)
        except Exception as e:
            logger.warning(f"Erro na classificacao via LLM: {e}, usando regras")
            return fallback_intent(text)

        label = parse_intent_label(response)
        if label is None:
            logger.info(f"Rotulo desconhecido do modelo: {summarize_text(response, 40)!r}")
            return fallback_intent(text)
        return label


async def classify_intent(text: str, classifier: IntentClassifier | None = None) -> IntentLabel:
    """Atalho: classifica com o classificador informado ou um padrao."""
    return await (classifier or IntentClassifier()).classify(text)

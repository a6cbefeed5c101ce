"""Quiz Generator - Geracao via LLM com fallback deterministico."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable

from core.exceptions import GenerationFailure
from core.logger import get_logger, summarize_text

from ..models.enums import QuizSource
from ..models.schemas import GeneratedQuiz, QuizOption, QuizQuestion
from ..prompts import DEFAULT_FALLBACK_SUBJECT, FALLBACK_QUIZZES, QUIZ_GENERATION_PROMPT
from .factory import LLMClientFactory

logger = get_logger("quiz.generator")

TextCompletion = Callable[[str], Awaitable[str]]

QUESTION_DELIMITER = re.compile(r"\**\s*Question\s+\d+\s*:\s*\**", re.IGNORECASE)
OPTION_MARKER = re.compile(r"(?:^|(?<=\s))\**([A-D])\)\**\s*")
ANSWER_LINE = re.compile(r"^[\s*]*correct\s+answers?\b[\s*:]*(.*)$", re.IGNORECASE | re.MULTILINE)
ANSWER_PAIR = re.compile(r"(\d+)\s*[-:.)]?\s*([A-D])(?![A-Za-z])", re.IGNORECASE)

SUBJECT_ALIASES = {"math": "Mathematics", "maths": "Mathematics"}


def _collapse(text: str) -> str:
    return " ".join(text.replace("*", " ").split())


def _parse_block(index: int, block: str) -> QuizQuestion:
    markers = list(OPTION_MARKER.finditer(block))
    if not markers:
        raise GenerationFailure(f"Questao {index} sem alternativas", details={"question": index})

    text = _collapse(block[: markers[0].start()])
    if not text:
        raise GenerationFailure(f"Questao {index} sem enunciado", details={"question": index})

    options: list[QuizOption] = []
    seen: set[str] = set()
    for position, marker in enumerate(markers):
        label = marker.group(1).upper()
        end = markers[position + 1].start() if position + 1 < len(markers) else len(block)
        option_text = _collapse(block[marker.end() : end])
        if label in seen or not option_text:
            continue
        seen.add(label)
        options.append(QuizOption(label=label, text=option_text))
        if len(options) == 4:
            break

    if len(options) < 2:
        raise GenerationFailure(
            f"Questao {index} com {len(options)} alternativa(s)", details={"question": index}
        )
    return QuizQuestion(index=index, text=text, options=options)


def parse_quiz_text(text: str, subject: str, count: int) -> GeneratedQuiz:
    """Converte a resposta em texto do modelo em um GeneratedQuiz.

    Formato esperado: blocos "Question N:" com alternativas "A) ..." (uma
    por linha ou na mesma linha) e uma linha "Correct answers: 1-A, 2-C".

    Raises:
        GenerationFailure: Contagem de questoes errada, alternativas
            insuficientes, gabarito ausente ou fora das alternativas
    """
    if not text or not text.strip():
        raise GenerationFailure("Resposta vazia do modelo")

    key_by_number: dict[int, str] = {}
    key_match = ANSWER_LINE.search(text)
    if key_match:
        for number, letter in ANSWER_PAIR.findall(key_match.group(1)):
            key_by_number.setdefault(int(number), letter.upper())
        text = text[: key_match.start()] + text[key_match.end() :]

    blocks = [block for block in QUESTION_DELIMITER.split(text)[1:] if block.strip()]
    if len(blocks) != count:
        raise GenerationFailure(
            f"Esperado {count} questoes, recebido {len(blocks)}",
            details={"expected": count, "received": len(blocks)},
        )

    questions = [_parse_block(index, block) for index, block in enumerate(blocks, start=1)]

    answer_key = []
    for question in questions:
        letter = key_by_number.get(question.index)
        if letter is None:
            raise GenerationFailure(
                f"Gabarito ausente para a questao {question.index}",
                details={"question": question.index},
            )
        if letter not in question.labels:
            raise GenerationFailure(
                f"Gabarito {letter} fora das alternativas da questao {question.index}",
                details={"question": question.index, "letter": letter},
            )
        answer_key.append(letter)

    return GeneratedQuiz(
        subject=subject, questions=questions, answer_key=answer_key, source=QuizSource.LLM
    )


def fallback_quiz(subject: str, count: int = 3) -> GeneratedQuiz:
    """Quiz fixo por materia (Mathematics para materias sem banco).

    Retorna no maximo `count` questoes; bancos menores retornam inteiros.
    """
    normalized = SUBJECT_ALIASES.get(subject.strip().lower(), subject.strip().title())
    bank = FALLBACK_QUIZZES.get(normalized) or FALLBACK_QUIZZES[DEFAULT_FALLBACK_SUBJECT]

    questions = []
    answer_key = []
    for index, (text, options, correct) in enumerate(bank[: max(count, 1)], start=1):
        questions.append(
            QuizQuestion(
                index=index,
                text=text,
                options=[QuizOption(label=label, text=option) for label, option in zip("ABCD", options)],
            )
        )
        answer_key.append(correct)

    return GeneratedQuiz(
        subject=subject, questions=questions, answer_key=answer_key, source=QuizSource.FALLBACK
    )


class QuizGenerator:
    """Adaptador de geracao de quizzes.

    Tenta o modelo com timeout; qualquer falha (timeout, erro do SDK,
    resposta malformada) cai no quiz fixo da materia. Nunca levanta.

    Example:
        >>> generator = QuizGenerator(timeout=20.0)
        >>> quiz = await generator.generate("Mathematics", count=3)
        >>> quiz.source  # QuizSource.LLM ou QuizSource.FALLBACK
    """

    def __init__(
        self,
        llm: TextCompletion | None = None,
        timeout: float = 20.0,
        enabled: bool = True,
        model: str = LLMClientFactory.DEFAULT_MODEL,
    ):
        """Inicializa gerador.

        Args:
            llm: Funcao async prompt -> texto (default: Claude Agent SDK)
            timeout: Limite em segundos para a chamada ao modelo
            enabled: False usa sempre o fallback
            model: Alias do modelo quando llm nao e informado
        """
        self.timeout = timeout
        self.enabled = enabled
        self._llm = llm or self._default_llm(model)

    @staticmethod
    def _default_llm(model: str) -> TextCompletion:
        options = LLMClientFactory.create_quiz_options(model)

        async def complete(prompt: str) -> str:
            return await LLMClientFactory.complete_text(prompt, options)

        return complete

    async def generate(self, subject: str, count: int = 3) -> GeneratedQuiz:
        if not self.enabled:
            return fallback_quiz(subject, count)

        prompt = QUIZ_GENERATION_PROMPT.format(subject=subject, count=count)
        text = ""
        try:
            text = await asyncio.wait_for(self._llm(prompt), timeout=self.timeout)
            quiz = parse_quiz_text(text, subject, count)
            logger.info(f"Quiz gerado via LLM: {subject} ({len(quiz.questions)} questoes)")
            return quiz
        except asyncio.TimeoutError:
            logger.warning(f"Timeout ({self.timeout}s) na geracao de quiz de {subject}, usando fallback")
        except GenerationFailure as e:
            logger.warning(f"Resposta malformada do modelo ({e.message}), usando fallback")
            logger.debug(f"Texto recebido: {summarize_text(text, 200)}")
        except Exception as e:
            logger.warning(f"Erro na geracao de quiz de {subject}: {e}, usando fallback")

        return fallback_quiz(subject, count)

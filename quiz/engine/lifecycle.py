"""Quiz Lifecycle - Criacao, consulta e consumo de sessoes de quiz."""

from __future__ import annotations

import asyncio
import weakref
from datetime import timedelta

from core.exceptions import (
    FormatError,
    NoActiveSessionError,
    SessionExpiredError,
    SingleAnswerExpectedError,
)
from core.logger import get_logger

from ..models.enums import QuizMode
from ..models.schemas import AnswerFeedback, GeneratedQuiz, GradingResult
from ..models.state import DEFAULT_TTL, QuizSession
from ..storage.session_store import QuizSessionStore
from .scoring_engine import QuizGradingEngine

logger = get_logger("quiz.lifecycle")


class QuizLifecycleController:
    """Maquina de estados das sessoes de quiz.

    Estados: ausente -> ativa -> (expirada, so na leitura) -> ausente.

    Toda leitura/escrita do store passa por aqui, sob um lock por owner:
    duas mensagens quase simultaneas do mesmo remetente nunca corrigem a
    mesma sessao duas vezes.

    Example:
        >>> controller = QuizLifecycleController(QuizSessionStore())
        >>> await controller.create("+254712345678", quiz)
        >>> result = await controller.grade("+254712345678", ["A", "C", "B"])
    """

    def __init__(
        self,
        store: QuizSessionStore,
        grading: QuizGradingEngine | None = None,
        ttl: timedelta = DEFAULT_TTL,
        default_mode: QuizMode = QuizMode.ATOMIC,
    ):
        self.store = store
        self.grading = grading or QuizGradingEngine()
        self.ttl = ttl
        self.default_mode = default_mode
        # Entrada some quando nenhuma corrotina segura ou espera o lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, owner: str) -> asyncio.Lock:
        lock = self._locks.get(owner)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[owner] = lock
        return lock

    def _resolve(self, owner: str) -> QuizSession:
        """Sessao ativa do owner (chamar com o lock adquirido).

        Raises:
            SessionExpiredError: Havia sessao, mas passou do TTL (e removida)
            NoActiveSessionError: Nenhuma sessao
        """
        session = self.store.peek(owner)
        if session is None:
            raise NoActiveSessionError(owner)
        if session.is_expired(self.store.now()):
            self.store.delete(owner)
            logger.info(f"[Quiz {owner}] Sessao expirada descartada")
            raise SessionExpiredError(owner)
        return session

    # =========================================================================
    # TRANSICOES
    # =========================================================================

    async def create(
        self, owner: str, quiz: GeneratedQuiz, mode: QuizMode | None = None
    ) -> QuizSession:
        """Cria sessao para o owner, descartando qualquer quiz em andamento."""
        session = QuizSession.from_quiz(
            owner,
            quiz,
            now=self.store.now(),
            ttl=self.ttl,
            mode=mode or self.default_mode,
        )
        async with self._lock_for(owner):
            previous = self.store.put(session)

        if previous is not None and not previous.is_expired(session.created_at):
            logger.warning(
                f"[Quiz {owner}] Quiz em andamento ({previous.subject}) substituido por {quiz.subject}"
            )
        logger.info(
            f"[Quiz {owner}] Criado: {quiz.subject}, {session.total_questions} questoes, "
            f"modo={session.mode.value}, origem={quiz.source.value}"
        )
        return session

    async def lookup(self, owner: str) -> QuizSession | None:
        """Sessao ativa ou None (sessao expirada e removida)."""
        async with self._lock_for(owner):
            return self.store.get(owner)

    async def has_active_session(self, owner: str) -> bool:
        return await self.lookup(owner) is not None

    async def consume(self, owner: str) -> bool:
        """Remove a sessao do owner incondicionalmente."""
        async with self._lock_for(owner):
            return self.store.delete(owner)

    # =========================================================================
    # CORRECAO
    # =========================================================================

    async def grade(self, owner: str, answers: list[str]) -> GradingResult:
        """Correcao atomica de todas as respostas.

        A sessao so e removida se a correcao acontecer; com contagem errada
        ela continua ativa para nova tentativa.

        Raises:
            NoActiveSessionError: Sem quiz ativo (ou expirado)
            SingleAnswerExpectedError: Sessao no modo incremental
            FormatError: Numero de respostas diferente do numero de questoes
        """
        async with self._lock_for(owner):
            session = self._resolve(owner)

            if session.mode == QuizMode.INCREMENTAL:
                logger.info(
                    f"[Quiz {owner}] Correcao atomica recusada (modo incremental, "
                    f"{len(session.answers_given)}/{session.total_questions} respondidas)"
                )
                raise SingleAnswerExpectedError(len(answers), session.current_index + 1)

            if len(answers) != session.total_questions:
                logger.info(
                    f"[Quiz {owner}] Contagem invalida: {len(answers)}/{session.total_questions}"
                )
                raise FormatError(
                    expected_count=session.total_questions, received_count=len(answers)
                )

            result = self.grading.grade(session, answers)
            self.store.delete(owner)

        logger.info(
            f"[Quiz {owner}] Corrigido: {result.correct_count}/{result.total_questions} "
            f"({result.percentage}%)"
        )
        return result

    async def answer(self, owner: str, answer: str) -> AnswerFeedback:
        """Registra uma resposta no modo incremental.

        Cada resposta parcial revalida a expiracao; o TTL nao e renovado.

        Raises:
            NoActiveSessionError: Sem quiz ativo
            SessionExpiredError: Quiz expirou entre as perguntas
        """
        async with self._lock_for(owner):
            session = self._resolve(owner)

            is_correct, correct = self.grading.evaluate_answer(session, answer)
            question_number = session.current_index + 1
            session.answers_given.append(answer.strip().upper())

            result = None
            if session.is_complete:
                result = self.grading.summarize(
                    session.subject, session.answer_key, session.answers_given
                )
                self.store.delete(owner)

            feedback = AnswerFeedback(
                question_number=question_number,
                user_answer=answer.strip().upper(),
                correct_answer=correct,
                is_correct=is_correct,
                answered=len(session.answers_given),
                total_questions=session.total_questions,
                next_question=session.current_question,
                result=result,
            )

        if result is not None:
            logger.info(
                f"[Quiz {owner}] Concluido (incremental): {result.correct_count}/"
                f"{result.total_questions} ({result.percentage}%)"
            )
        return feedback

    async def active_sessions(self) -> int:
        return self.store.active_count()

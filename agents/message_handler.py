"""MessageHandler - Roteamento de mensagens recebidas para os fluxos do bot.

Fluxo:
- Quiz ativo + mensagem que e uma resposta -> correcao direta (sem LLM)
- Caso contrario -> classificacao de intencao -> handler da intencao
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from core.exceptions import (
    FormatError,
    NoActiveSessionError,
    RecordStoreError,
    SessionExpiredError,
    SingleAnswerExpectedError,
)
from core.logger import get_logger, summarize_text
from quiz.engine.answer_parser import looks_like_answer, parse_answers, parse_single_answer
from quiz.engine.lifecycle import QuizLifecycleController
from quiz.llm.generator import QuizGenerator
from quiz.models import GradingResult, QuizMode
from records.database import StudentDatabase
from records.registration import RegistrationService
from utils.validators import normalize_phone

from agents import replies
from agents.extractors import (
    extract_student_name,
    extract_subject,
    parse_grade_recording,
    parse_parent_registration,
    parse_student_registration,
    parse_teacher_registration,
)
from agents.intent_classifier import IntentClassifier, IntentLabel

logger = get_logger("message_handler")


@dataclass
class HandledMessage:
    """Resultado do processamento de uma mensagem."""

    intent: IntentLabel
    reply: str
    owner: str = ""


class MessageHandler:
    """Processa uma mensagem de um remetente e produz o texto de resposta.

    Erros de quiz viram texto de chat; erros inesperados propagam para o
    router (que registra, pede desculpas ao usuario e retorna 500).

    Example:
        >>> handler = MessageHandler(controller, generator, classifier, database, registration)
        >>> reply = await handler.handle_inbound_message("whatsapp:+254712345678", "Quiz me on Math")
    """

    def __init__(
        self,
        controller: QuizLifecycleController,
        generator: QuizGenerator,
        classifier: IntentClassifier,
        database: StudentDatabase,
        registration: RegistrationService,
        question_count: int = 3,
        quiz_mode: QuizMode = QuizMode.ATOMIC,
    ):
        self.controller = controller
        self.generator = generator
        self.classifier = classifier
        self.db = database
        self.registration = registration
        self.question_count = question_count
        self.quiz_mode = quiz_mode

    async def handle_inbound_message(self, sender_id: str, raw_text: str | None) -> str:
        handled = await self.process(sender_id, raw_text)
        return handled.reply

    async def process(self, sender_id: str, raw_text: str | None) -> HandledMessage:
        owner = normalize_phone(sender_id)
        text = (raw_text or "").strip()
        logger.info(f"[{owner}] Mensagem: {summarize_text(text)!r}")

        if not text:
            return HandledMessage(IntentLabel.HELP, replies.EMPTY_MESSAGE, owner)

        session = await self.controller.lookup(owner)
        if session is not None:
            if session.mode == QuizMode.INCREMENTAL:
                letter = parse_single_answer(text)
                if letter:
                    return HandledMessage(
                        IntentLabel.QUIZ_ANSWER, await self._answer_incremental(owner, letter), owner
                    )
            elif looks_like_answer(text, session.total_questions):
                return HandledMessage(
                    IntentLabel.QUIZ_ANSWER, await self._grade_answers(owner, text), owner
                )

        intent = await self.classifier.classify(text)
        logger.info(f"[{owner}] Intent: {intent.value}")

        handlers = {
            IntentLabel.REGISTER_STUDENT: self._register_student,
            IntentLabel.REGISTER_TEACHER: self._register_teacher,
            IntentLabel.REGISTER_PARENT: self._register_parent,
            IntentLabel.CHECK_PERFORMANCE: self._check_performance,
            IntentLabel.QUIZ_REQUEST: self._start_quiz,
            IntentLabel.QUIZ_ANSWER: self._grade_answers,
            IntentLabel.RECORD_GRADES: self._record_grades,
            IntentLabel.CLASS_STATS: self._class_stats,
        }
        handler = handlers.get(intent, self._help)
        return HandledMessage(intent, await handler(owner, text), owner)

    # =========================================================================
    # QUIZ
    # =========================================================================

    async def _start_quiz(self, owner: str, text: str) -> str:
        subject = extract_subject(text)
        # Geracao fora do lock do owner
        quiz = await self.generator.generate(subject, self.question_count)
        session = await self.controller.create(owner, quiz, mode=self.quiz_mode)
        return replies.quiz_intro(session)

    async def _grade_answers(self, owner: str, text: str) -> str:
        session = await self.controller.lookup(owner)
        expected = session.total_questions if session else None
        answers = parse_answers(text, expected)

        try:
            result = await self.controller.grade(owner, answers)
        except SessionExpiredError:
            return replies.QUIZ_EXPIRED
        except NoActiveSessionError:
            return replies.NO_ACTIVE_QUIZ
        except SingleAnswerExpectedError as e:
            return replies.single_letter_expected(e.question_number)
        except FormatError as e:
            return replies.wrong_answer_count(e.expected_count)

        await self._save_quiz_score(owner, result)
        return replies.quiz_results(result)

    async def _answer_incremental(self, owner: str, letter: str) -> str:
        try:
            feedback = await self.controller.answer(owner, letter)
        except SessionExpiredError:
            return replies.QUIZ_EXPIRED
        except NoActiveSessionError:
            return replies.NO_ACTIVE_QUIZ

        if feedback.result is not None:
            await self._save_quiz_score(owner, feedback.result)
        return replies.answer_feedback(feedback)

    async def _save_quiz_score(self, owner: str, result: GradingResult) -> None:
        """Registra o resultado no historico do aluno, se o remetente for aluno."""
        try:
            await asyncio.to_thread(
                self.db.record_quiz_score,
                owner,
                result.subject,
                result.correct_count,
                result.total_questions,
            )
        except RecordStoreError as e:
            logger.error(f"[{owner}] Resultado do quiz nao registrado: {e.message}")

    # =========================================================================
    # REGISTROS
    # =========================================================================

    async def _register_student(self, owner: str, text: str) -> str:
        data = parse_student_registration(text)
        if data is None:
            return replies.INVALID_STUDENT_REGISTRATION
        result = await asyncio.to_thread(
            self.registration.register_student,
            data.name,
            owner,
            data.class_name,
            data.parent_phone,
        )
        return result.message

    async def _register_teacher(self, owner: str, text: str) -> str:
        data = parse_teacher_registration(text)
        if data is None:
            return replies.INVALID_TEACHER_REGISTRATION
        result = await asyncio.to_thread(
            self.registration.register_teacher, data.name, owner, data.subjects, []
        )
        return result.message

    async def _register_parent(self, owner: str, text: str) -> str:
        data = parse_parent_registration(text)
        if data is None:
            return replies.INVALID_PARENT_REGISTRATION
        result = await asyncio.to_thread(
            self.registration.register_parent,
            data.name or "Parent",
            data.phone or owner,
            data.child_name,
        )
        return result.message

    async def _check_performance(self, owner: str, text: str) -> str:
        name = extract_student_name(text)
        if name:
            student = await asyncio.to_thread(self.db.find_student_by_name, name)
        else:
            # "Check my performance" vindo do proprio aluno
            student = await asyncio.to_thread(self.db.find_student_by_phone, owner)
        return replies.performance_report(student)

    async def _record_grades(self, owner: str, text: str) -> str:
        records = parse_grade_recording(text)
        if not records:
            return replies.INVALID_GRADE_RECORDING

        failed = []
        for record in records:
            updated = await asyncio.to_thread(
                self.db.record_grade,
                record.student_name,
                record.subject,
                record.score,
                record.total,
            )
            if updated is None:
                failed.append(record.student_name)
        return replies.grades_recorded(records, failed)

    async def _class_stats(self, owner: str, text: str) -> str:
        stats = await asyncio.to_thread(self.db.class_stats)
        return replies.class_stats_reply(stats)

    async def _help(self, owner: str, text: str) -> str:
        user = await asyncio.to_thread(self.registration.get_user_by_phone, owner)
        return replies.help_text(user)

    async def active_quizzes(self) -> int:
        return await self.controller.active_sessions()

# =============================================================================
# TESTES - Quiz Lifecycle Controller
# =============================================================================
# Criacao, correcao atomica, modo incremental e expiracao
# =============================================================================

import asyncio
import gc

import pytest

from core.exceptions import (
    FormatError,
    NoActiveSessionError,
    SessionExpiredError,
    SingleAnswerExpectedError,
)

OWNER = "+254712345678"


class TestCreate:
    """Criacao de sessao."""

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, controller, sample_quiz):
        session = await controller.create(OWNER, sample_quiz)

        assert await controller.lookup(OWNER) is session
        assert await controller.has_active_session(OWNER)
        assert session.answer_key == ["A", "C", "B"]

    @pytest.mark.asyncio
    async def test_create_overwrites_existing_session(
        self, controller, sample_quiz, quiz_factory, capture_logs
    ):
        """Novo quiz substitui o anterior (com aviso no log)."""
        await controller.create(OWNER, sample_quiz)
        second = await controller.create(OWNER, quiz_factory("Science", ["D", "D", "D"]))

        assert (await controller.lookup(OWNER)) is second
        assert any("substituido" in record.message for record in capture_logs.records)

    @pytest.mark.asyncio
    async def test_consume(self, controller, sample_quiz):
        await controller.create(OWNER, sample_quiz)
        assert await controller.consume(OWNER) is True
        assert await controller.lookup(OWNER) is None


class TestAtomicGrade:
    """Correcao de todas as respostas de uma vez."""

    @pytest.mark.asyncio
    async def test_grade_removes_session(self, controller, sample_quiz):
        await controller.create(OWNER, sample_quiz)
        result = await controller.grade(OWNER, ["A", "C", "D"])

        assert result.correct_count == 2
        assert result.percentage == 67
        assert await controller.lookup(OWNER) is None

    @pytest.mark.asyncio
    async def test_second_grade_has_no_session(self, controller, sample_quiz):
        await controller.create(OWNER, sample_quiz)
        await controller.grade(OWNER, ["A", "C", "B"])

        with pytest.raises(NoActiveSessionError):
            await controller.grade(OWNER, ["A", "C", "B"])

    @pytest.mark.asyncio
    async def test_wrong_count_keeps_session(self, controller, sample_quiz):
        await controller.create(OWNER, sample_quiz)

        with pytest.raises(FormatError) as exc:
            await controller.grade(OWNER, ["A", "C"])

        assert exc.value.expected_count == 3
        assert await controller.has_active_session(OWNER)

    @pytest.mark.asyncio
    async def test_grade_without_session(self, controller):
        with pytest.raises(NoActiveSessionError) as exc:
            await controller.grade(OWNER, ["A", "B", "C"])
        assert not isinstance(exc.value, SessionExpiredError)

    @pytest.mark.asyncio
    async def test_grade_after_expiry(self, controller, sample_quiz, clock):
        await controller.create(OWNER, sample_quiz)
        clock.advance(minutes=31)

        with pytest.raises(SessionExpiredError):
            await controller.grade(OWNER, ["A", "C", "B"])
        assert controller.store.peek(OWNER) is None

    @pytest.mark.asyncio
    async def test_concurrent_grades_only_one_wins(self, controller, sample_quiz):
        """Duas submissoes simultaneas: apenas uma e corrigida."""
        await controller.create(OWNER, sample_quiz)

        results = await asyncio.gather(
            controller.grade(OWNER, ["A", "C", "B"]),
            controller.grade(OWNER, ["A", "C", "B"]),
            return_exceptions=True,
        )

        graded = [r for r in results if not isinstance(r, Exception)]
        errors = [r for r in results if isinstance(r, NoActiveSessionError)]
        assert len(graded) == 1
        assert len(errors) == 1


class TestIncremental:
    """Uma resposta por mensagem."""

    @pytest.mark.asyncio
    async def test_feedback_per_answer_and_completion(self, incremental_controller, sample_quiz):
        await incremental_controller.create(OWNER, sample_quiz)

        first = await incremental_controller.answer(OWNER, "a")
        assert first.is_correct
        assert first.question_number == 1
        assert first.next_question.index == 2
        assert not first.finished

        second = await incremental_controller.answer(OWNER, "B")
        assert not second.is_correct
        assert second.correct_answer == "C"

        third = await incremental_controller.answer(OWNER, "B")
        assert third.finished
        assert third.next_question is None
        assert third.result.correct_count == 2
        assert third.result.percentage == 67
        assert await incremental_controller.lookup(OWNER) is None

    @pytest.mark.asyncio
    async def test_partial_answer_after_expiry(self, incremental_controller, sample_quiz, clock):
        await incremental_controller.create(OWNER, sample_quiz)
        await incremental_controller.answer(OWNER, "A")
        clock.advance(minutes=30)

        with pytest.raises(SessionExpiredError):
            await incremental_controller.answer(OWNER, "C")

    @pytest.mark.asyncio
    async def test_ttl_not_renewed_by_answers(self, incremental_controller, sample_quiz, clock):
        session = await incremental_controller.create(OWNER, sample_quiz)
        expires_at = session.expires_at

        clock.advance(minutes=10)
        await incremental_controller.answer(OWNER, "A")

        assert (await incremental_controller.lookup(OWNER)).expires_at == expires_at

    @pytest.mark.asyncio
    async def test_atomic_grade_refused_mid_quiz(self, incremental_controller, sample_quiz):
        """Depois de ver a letra correta, reenviar tudo nao corrige de novo."""
        await incremental_controller.create(OWNER, sample_quiz)
        feedback = await incremental_controller.answer(OWNER, "B")
        assert feedback.correct_answer == "A"

        with pytest.raises(SingleAnswerExpectedError) as exc_info:
            await incremental_controller.grade(OWNER, ["A", "C", "B"])

        assert exc_info.value.question_number == 2
        session = await incremental_controller.lookup(OWNER)
        assert session.answers_given == ["B"]

        await incremental_controller.answer(OWNER, "C")
        last = await incremental_controller.answer(OWNER, "B")
        assert last.result.correct_count == 2


class TestLocks:
    """Locks por owner nao se acumulam."""

    @pytest.mark.asyncio
    async def test_locks_released_after_use(self, controller, sample_quiz):
        for i in range(1000):
            await controller.lookup(f"+2547000{i:05d}")
        await controller.create(OWNER, sample_quiz)
        await controller.grade(OWNER, ["A", "C", "B"])

        gc.collect()
        assert len(controller._locks) == 0

    @pytest.mark.asyncio
    async def test_waiters_share_the_same_lock(self, controller, sample_quiz):
        await controller.create(OWNER, sample_quiz)

        async with controller._lock_for(OWNER):
            pending = asyncio.ensure_future(controller.grade(OWNER, ["A", "C", "B"]))
            await asyncio.sleep(0)
            assert controller._lock_for(OWNER).locked()
            assert not pending.done()

        result = await pending
        assert result.correct_count == 3

# =============================================================================
# TESTES - Quiz Generator
# =============================================================================
# Parsing da resposta do modelo e fallback deterministico
# =============================================================================

import asyncio
from unittest.mock import AsyncMock

import pytest

from core.exceptions import GenerationFailure
from quiz.llm.generator import QuizGenerator, fallback_quiz, parse_quiz_text
from quiz.models import QuizSource

WELL_FORMED = """Here is your quiz!

Question 1: What is 15 × 4?
A) 45
B) 60
C) 50
D) 55

Question 2: Solve 2x + 5 = 15
A) x=10
B) x=5
C) x=7.5
D) x=8

Question 3: Area of a rectangle 8 cm by 5 cm?
A) 13 B) 40 C) 26 D) 45

Correct answers: 1-B, 2-B, 3-B
"""


class TestParseQuizText:
    """Conversao do texto do modelo em GeneratedQuiz."""

    def test_well_formed(self):
        quiz = parse_quiz_text(WELL_FORMED, "Mathematics", 3)

        assert len(quiz.questions) == 3
        assert quiz.answer_key == ["B", "B", "B"]
        assert quiz.source == QuizSource.LLM
        assert quiz.questions[0].text == "What is 15 × 4?"
        assert [o.text for o in quiz.questions[0].options] == ["45", "60", "50", "55"]

    def test_inline_options(self):
        quiz = parse_quiz_text(WELL_FORMED, "Mathematics", 3)
        third = quiz.questions[2]

        assert third.text == "Area of a rectangle 8 cm by 5 cm?"
        assert third.labels == ["A", "B", "C", "D"]
        assert third.options[1].text == "40"

    def test_markdown_question_headers(self):
        text = "*Question 1:* Capital of Kenya?\nA) Nairobi\nB) Mombasa\n\n**Correct answers:** 1-A"
        quiz = parse_quiz_text(text, "Geography", 1)
        assert quiz.questions[0].text == "Capital of Kenya?"
        assert quiz.answer_key == ["A"]

    def test_answer_pairs_in_several_formats(self):
        text = WELL_FORMED.replace("Correct answers: 1-B, 2-B, 3-B", "Correct answers: 1: A, 2B, 3 - C")
        assert parse_quiz_text(text, "Mathematics", 3).answer_key == ["A", "B", "C"]

    def test_missing_answer_line(self):
        text = WELL_FORMED.replace("Correct answers: 1-B, 2-B, 3-B", "")
        with pytest.raises(GenerationFailure):
            parse_quiz_text(text, "Mathematics", 3)

    def test_missing_key_for_one_question(self):
        text = WELL_FORMED.replace("1-B, 2-B, 3-B", "1-B, 2-B")
        with pytest.raises(GenerationFailure):
            parse_quiz_text(text, "Mathematics", 3)

    def test_wrong_question_count(self):
        with pytest.raises(GenerationFailure):
            parse_quiz_text(WELL_FORMED, "Mathematics", 5)

    def test_key_outside_options(self):
        text = "Question 1: Pick one\nA) yes\nB) no\n\nCorrect answers: 1-D"
        with pytest.raises(GenerationFailure):
            parse_quiz_text(text, "English", 1)

    def test_too_few_options(self):
        text = "Question 1: Pick one\nA) yes\n\nCorrect answers: 1-A"
        with pytest.raises(GenerationFailure):
            parse_quiz_text(text, "English", 1)

    def test_empty(self):
        with pytest.raises(GenerationFailure):
            parse_quiz_text("", "English", 3)


class TestFallbackQuiz:
    """Quiz fixo por materia."""

    def test_mathematics_default(self):
        quiz = fallback_quiz("Mathematics", 3)

        assert quiz.source == QuizSource.FALLBACK
        assert len(quiz.questions) == 3
        assert quiz.questions[0].text == "What is 15 × 4?"
        assert quiz.answer_key == ["B", "C", "D"]

    def test_unknown_subject_uses_mathematics_bank(self):
        quiz = fallback_quiz("History", 2)
        assert quiz.subject == "History"
        assert quiz.questions[0].text == "What is 15 × 4?"
        assert len(quiz.questions) == 2

    def test_subject_banks(self):
        assert fallback_quiz("science", 1).answer_key == ["C"]
        assert fallback_quiz("English", 1).questions[0].text.startswith("Choose the noun")

    def test_count_larger_than_bank(self):
        quiz = fallback_quiz("Kiswahili", 10)
        assert len(quiz.questions) == 3


class TestQuizGenerator:
    """Adaptador: modelo com timeout, fallback sempre."""

    @pytest.mark.asyncio
    async def test_uses_model_output(self):
        llm = AsyncMock(return_value=WELL_FORMED)
        generator = QuizGenerator(llm=llm, timeout=1.0)

        quiz = await generator.generate("Mathematics", 3)

        assert quiz.source == QuizSource.LLM
        prompt = llm.await_args.args[0]
        assert "3 multiple choice questions about Mathematics" in prompt

    @pytest.mark.asyncio
    async def test_malformed_output_falls_back(self):
        generator = QuizGenerator(llm=AsyncMock(return_value="Sorry, I can't do that."), timeout=1.0)

        quiz = await generator.generate("Science", 3)

        assert quiz.source == QuizSource.FALLBACK
        assert quiz.subject == "Science"

    @pytest.mark.asyncio
    async def test_sdk_error_falls_back(self):
        generator = QuizGenerator(llm=AsyncMock(side_effect=RuntimeError("boom")), timeout=1.0)
        assert (await generator.generate("English", 3)).source == QuizSource.FALLBACK

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self):
        async def slow(prompt):
            await asyncio.sleep(1)
            return WELL_FORMED

        generator = QuizGenerator(llm=slow, timeout=0.01)
        assert (await generator.generate("Mathematics", 3)).source == QuizSource.FALLBACK

    @pytest.mark.asyncio
    async def test_disabled_skips_model(self):
        llm = AsyncMock(return_value=WELL_FORMED)
        generator = QuizGenerator(llm=llm, enabled=False)

        quiz = await generator.generate("Mathematics", 3)

        assert quiz.source == QuizSource.FALLBACK
        llm.assert_not_awaited()

"""Quiz Scoring Engine - Correcao de respostas e percentual."""

from core.exceptions import FormatError

from ..models.enums import PerformanceBand
from ..models.schemas import GradingResult, QuestionResult
from ..models.state import QuizSession


def round_percentage(correct: int, total: int) -> int:
    """Percentual arredondado com meio para cima (2/3 -> 67, 1/8 -> 13).

    Aritmetica inteira: evita o arredondamento bancario de round().
    """
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


class QuizGradingEngine:
    """Motor de correcao para quizzes de multipla escolha.

    Compara respostas com o gabarito da sessao, sem diferenciar
    maiusculas/minusculas, e produz um GradingResult com o detalhamento
    por questao.

    Faixas de desempenho:
        - >= 80%: Excelente
        - 60-79%: Bom
        - < 60%: Continue tentando

    Example:
        >>> engine = QuizGradingEngine()
        >>> result = engine.grade(session, ["A", "C", "B"])
        >>> print(result.percentage)  # 67
    """

    # Faixas (threshold, band), da maior para a menor
    BAND_THRESHOLDS = [
        (80, PerformanceBand.EXCELLENT),
        (60, PerformanceBand.GOOD),
        (0, PerformanceBand.KEEP_TRYING),
    ]

    def performance_band(self, percentage: int) -> PerformanceBand:
        """Retorna a faixa de desempenho para um percentual."""
        for threshold, band in self.BAND_THRESHOLDS:
            if percentage >= threshold:
                return band
        return PerformanceBand.KEEP_TRYING

    def summarize(
        self, subject: str, answer_key: list[str], answers: list[str]
    ) -> GradingResult:
        """Corrige uma lista completa de respostas contra um gabarito.

        Args:
            subject: Materia (ecoada no resultado)
            answer_key: Gabarito
            answers: Respostas do usuario, mesma ordem

        Returns:
            GradingResult com flags por questao e percentual

        Raises:
            FormatError: Se a contagem de respostas difere do gabarito
        """
        if len(answers) != len(answer_key):
            raise FormatError(expected_count=len(answer_key), received_count=len(answers))

        results = []
        correct_count = 0
        for number, (answer, correct) in enumerate(zip(answers, answer_key), start=1):
            user_answer = answer.strip().upper()
            correct_answer = correct.strip().upper()
            is_correct = user_answer == correct_answer
            if is_correct:
                correct_count += 1
            results.append(
                QuestionResult(
                    question_number=number,
                    user_answer=user_answer,
                    correct_answer=correct_answer,
                    is_correct=is_correct,
                )
            )

        return GradingResult(
            subject=subject,
            total_questions=len(answer_key),
            correct_count=correct_count,
            percentage=round_percentage(correct_count, len(answer_key)),
            results=results,
        )

    def grade(self, session: QuizSession, answers: list[str]) -> GradingResult:
        """Correcao atomica: todas as respostas de uma vez."""
        return self.summarize(session.subject, session.answer_key, answers)

    def evaluate_answer(self, session: QuizSession, answer: str) -> tuple[bool, str]:
        """Avalia apenas a questao corrente (modo incremental).

        Returns:
            Tuple de (is_correct, letra correta)
        """
        correct = session.answer_key[session.current_index].upper()
        return answer.strip().upper() == correct, correct

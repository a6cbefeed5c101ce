"""Quiz Schemas - Modelos Pydantic de perguntas e resultados."""

from pydantic import BaseModel, Field, model_validator

from .enums import QuizSource

ANSWER_LETTERS = ("A", "B", "C", "D")


class QuizOption(BaseModel):
    """Alternativa de multipla escolha."""

    label: str = Field(..., description="Letra da alternativa (A, B, C, D)")
    text: str = Field(..., description="Texto da alternativa")


class QuizQuestion(BaseModel):
    """Questao do quiz."""

    index: int = Field(..., ge=1, description="Numero da questao (1-N)")
    text: str = Field(..., description="Enunciado da questao")
    options: list[QuizOption] = Field(..., max_length=4, description="Ate 4 alternativas")

    @property
    def labels(self) -> list[str]:
        return [option.label for option in self.options]

    def render(self) -> str:
        """Texto da questao com alternativas, uma por linha."""
        lines = [f"*Question {self.index}:* {self.text}"]
        lines.extend(f"{option.label}) {option.text}" for option in self.options)
        return "\n".join(lines)


class GeneratedQuiz(BaseModel):
    """Quiz pronto para virar sessao: perguntas + gabarito paralelo."""

    subject: str = Field(..., description="Materia do quiz")
    questions: list[QuizQuestion] = Field(..., min_length=1)
    answer_key: list[str] = Field(..., description="Uma letra por questao, mesma ordem")
    source: QuizSource = Field(default=QuizSource.LLM, description="llm ou fallback")

    @model_validator(mode="after")
    def _check_answer_key(self) -> "GeneratedQuiz":
        if len(self.answer_key) != len(self.questions):
            raise ValueError(
                f"Gabarito com {len(self.answer_key)} letras para {len(self.questions)} questoes"
            )
        normalized = [letter.strip().upper() for letter in self.answer_key]
        invalid = [letter for letter in normalized if letter not in ANSWER_LETTERS]
        if invalid:
            raise ValueError(f"Letras invalidas no gabarito: {invalid}")
        self.answer_key = normalized
        return self


class QuestionResult(BaseModel):
    """Correcao de uma questao."""

    question_number: int
    user_answer: str
    correct_answer: str
    is_correct: bool


class GradingResult(BaseModel):
    """Resultado derivado de uma passada de correcao (nao persistido)."""

    subject: str
    total_questions: int
    correct_count: int
    percentage: int = Field(..., ge=0, le=100)
    results: list[QuestionResult]


class AnswerFeedback(BaseModel):
    """Feedback de uma resposta no modo incremental."""

    question_number: int
    user_answer: str
    correct_answer: str
    is_correct: bool
    answered: int
    total_questions: int
    next_question: QuizQuestion | None = None
    result: GradingResult | None = Field(None, description="Preenchido ao concluir o quiz")

    @property
    def finished(self) -> bool:
        return self.result is not None

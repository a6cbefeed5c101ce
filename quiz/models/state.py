"""Quiz State - Sessao de quiz em andamento de um remetente."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from .enums import QuizMode
from .schemas import GeneratedQuiz, QuizQuestion

DEFAULT_TTL = timedelta(minutes=30)


@dataclass
class QuizSession:
    """Quiz em andamento de um unico owner.

    Attributes:
        owner: Identidade normalizada do remetente (ex: +254712345678)
        subject: Materia do quiz
        questions: Perguntas em ordem
        answer_key: Gabarito paralelo a questions
        created_at: Momento de criacao
        expires_at: created_at + TTL (nunca renovado)
        mode: ATOMIC ou INCREMENTAL
        answers_given: Respostas acumuladas (apenas INCREMENTAL)
    """

    owner: str
    subject: str
    questions: list[QuizQuestion]
    answer_key: list[str]
    created_at: datetime
    expires_at: datetime
    mode: QuizMode = QuizMode.ATOMIC
    answers_given: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.answer_key) != len(self.questions):
            raise ValueError(
                f"Gabarito ({len(self.answer_key)}) e perguntas ({len(self.questions)}) "
                "devem ter o mesmo tamanho"
            )
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at deve ser posterior a created_at")

    @classmethod
    def from_quiz(
        cls,
        owner: str,
        quiz: GeneratedQuiz,
        now: datetime,
        ttl: timedelta = DEFAULT_TTL,
        mode: QuizMode = QuizMode.ATOMIC,
    ) -> "QuizSession":
        """Cria sessao a partir de um quiz gerado."""
        return cls(
            owner=owner,
            subject=quiz.subject,
            questions=list(quiz.questions),
            answer_key=list(quiz.answer_key),
            created_at=now,
            expires_at=now + ttl,
            mode=mode,
        )

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_index(self) -> int:
        """Indice (0-based) da proxima pergunta no modo incremental."""
        return len(self.answers_given)

    @property
    def current_question(self) -> QuizQuestion | None:
        if self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    @property
    def is_complete(self) -> bool:
        return len(self.answers_given) == len(self.questions)

    def is_expired(self, now: datetime) -> bool:
        """Sessao so e visivel enquanto now < expires_at."""
        return now >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        """Snapshot serializavel (debug/logs)."""
        return {
            "owner": self.owner,
            "subject": self.subject,
            "questions": [q.model_dump() for q in self.questions],
            "answer_key": list(self.answer_key),
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "mode": self.mode.value,
            "answers_given": list(self.answers_given),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuizSession":
        """Recria sessao a partir de to_dict()."""
        return cls(
            owner=data["owner"],
            subject=data["subject"],
            questions=[QuizQuestion(**q) for q in data.get("questions", [])],
            answer_key=list(data.get("answer_key", [])),
            created_at=datetime.fromisoformat(data["created_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
            mode=QuizMode(data.get("mode", QuizMode.ATOMIC.value)),
            answers_given=list(data.get("answers_given", [])),
        )

"""Records Models - Alunos, professores e responsaveis."""

import datetime

from pydantic import BaseModel, ConfigDict, Field


def today_iso() -> str:
    return datetime.date.today().isoformat()


class Grade(BaseModel):
    """Nota de uma avaliacao."""

    subject: str = Field(..., description="Materia capitalizada")
    score: int = Field(..., ge=0)
    total: int = Field(default=100, gt=0)
    date: str = Field(default_factory=today_iso, description="Data ISO (YYYY-MM-DD)")

    @property
    def percentage(self) -> float:
        return self.score / self.total * 100


class Attendance(BaseModel):
    present: int = 0
    absent: int = 0
    total_days: int = 0

    @property
    def rate(self) -> float | None:
        """Percentual de presenca, None sem dias registrados."""
        if self.total_days <= 0:
            return None
        return self.present / self.total_days * 100


class Student(BaseModel):
    """Aluno registrado (students.json).

    O campo `class` do JSON e exposto como class_name.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    phone: str = ""
    class_name: str = Field(default="", alias="class")
    parent_phone: str = ""
    grades: list[Grade] = Field(default_factory=list)
    attendance: Attendance = Field(default_factory=Attendance)
    weak_areas: list[str] = Field(default_factory=list)
    registered_date: str = Field(default_factory=today_iso)

    def average_percentage(self) -> float | None:
        if not self.grades:
            return None
        return sum(grade.percentage for grade in self.grades) / len(self.grades)


class Teacher(BaseModel):
    id: str
    name: str
    phone: str = ""
    subjects: list[str] = Field(default_factory=list)
    classes: list[str] = Field(default_factory=list)
    registered_date: str = Field(default_factory=today_iso)


class Parent(BaseModel):
    id: str
    name: str
    phone: str = ""
    children: list[str] = Field(default_factory=list, description="IDs dos alunos")
    registered_date: str = Field(default_factory=today_iso)


class RegistrationResult(BaseModel):
    """Resultado de um registro (mensagem pronta para o chat)."""

    success: bool
    message: str
    record: Student | Teacher | Parent | None = None

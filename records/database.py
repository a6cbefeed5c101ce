"""Student Database - Consultas e atualizacoes sobre os arquivos JSON."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from core.exceptions import RecordStoreError
from core.logger import get_logger

from .json_store import JsonRecordFile
from .models import Attendance, Grade, Parent, Student, Teacher

logger = get_logger("records.database")

STUDENTS_FILE = "students.json"
TEACHERS_FILE = "teachers.json"
PARENTS_FILE = "parents.json"


class ClassStats(BaseModel):
    class_name: str
    total_students: int
    subject_averages: dict[str, float] = Field(default_factory=dict)


def capitalize_subject(subject: str) -> str:
    subject = subject.strip()
    return subject[:1].upper() + subject[1:]


def load_records(
    model: type[BaseModel], records: list[dict[str, Any]], strict: bool = False
) -> list[Any]:
    """Valida os registros brutos.

    Tolerante: registros invalidos sao ignorados (com log). Estrito, usado
    antes de regravar o arquivo: o primeiro registro invalido levanta
    RecordStoreError.
    """
    items = []
    for index, raw in enumerate(records):
        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            if strict:
                raise RecordStoreError(
                    f"Registro invalido ({model.__name__}) na posicao {index}",
                    details={"index": index, "errors": e.error_count()},
                ) from e
            logger.error(f"Registro invalido ignorado ({model.__name__}): {e.error_count()} erro(s)")
    return items


class StudentDatabase:
    """Acesso aos registros escolares em `data_dir`.

    Cada operacao le o arquivo inteiro e, quando altera, grava o arquivo
    inteiro de volta. Ler-alterar-gravar acontece sob `write_lock` (as
    chamadas chegam de threads via asyncio.to_thread).

    Example:
        >>> db = StudentDatabase(Path("data"))
        >>> db.record_grade("Amina", "math", 85)
        >>> db.class_stats()
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.students = JsonRecordFile(self.data_dir / STUDENTS_FILE)
        self.teachers = JsonRecordFile(self.data_dir / TEACHERS_FILE)
        self.parents = JsonRecordFile(self.data_dir / PARENTS_FILE)
        self.write_lock = threading.RLock()

    # =========================================================================
    # LEITURA
    # =========================================================================

    def all_students(self) -> list[Student]:
        return load_records(Student, self.students.read())

    def all_teachers(self) -> list[Teacher]:
        return load_records(Teacher, self.teachers.read())

    def all_parents(self) -> list[Parent]:
        return load_records(Parent, self.parents.read())

    def get_student_by_id(self, student_id: str) -> Student | None:
        return next((s for s in self.all_students() if s.id == student_id), None)

    def find_student_by_phone(self, phone: str) -> Student | None:
        return next((s for s in self.all_students() if s.phone == phone), None)

    def find_student_by_name(self, name: str | None) -> Student | None:
        """Busca por nome: exato, depois primeiro nome ou substring."""
        if not name or not name.strip():
            return None

        students = self.all_students()
        search = name.strip().lower()

        for student in students:
            if student.name.lower() == search:
                return student

        search_first = search.split()[0]
        for student in students:
            student_name = student.name.lower()
            first = student_name.split()[0] if student_name.split() else ""
            if first == search_first or search in student_name:
                return student
        return None

    # =========================================================================
    # ESCRITA
    # =========================================================================

    def save_students(self, students: list[Student]) -> None:
        self.students.write([s.model_dump(by_alias=True) for s in students])

    def _update_student(self, student_id: str, mutate: Callable[[Student], None]) -> Student | None:
        with self.write_lock:
            students = load_records(Student, self.students.read(strict=True), strict=True)
            for student in students:
                if student.id == student_id:
                    mutate(student)
                    self.save_students(students)
                    return student
        return None

    def record_grade(
        self, name: str, subject: str, score: int, total: int = 100
    ) -> Student | None:
        """Adiciona nota ao aluno encontrado por nome. None se nao existe."""
        student = self.find_student_by_name(name)
        if student is None:
            logger.info(f"Aluno nao encontrado: {name}")
            return None

        grade = Grade(subject=capitalize_subject(subject), score=int(score), total=total)
        updated = self._update_student(student.id, lambda s: s.grades.append(grade))
        if updated:
            logger.info(f"Nota registrada: {updated.name} - {grade.subject}: {grade.score}/{grade.total}")
        return updated

    def record_quiz_score(
        self, phone: str, subject: str, correct: int, total: int
    ) -> Student | None:
        """Registra resultado de quiz para o aluno dono do telefone."""
        student = self.find_student_by_phone(phone)
        if student is None:
            return None

        grade = Grade(subject=capitalize_subject(subject), score=correct, total=total)
        updated = self._update_student(student.id, lambda s: s.grades.append(grade))
        if updated:
            logger.info(f"Quiz registrado: {updated.name} - {grade.subject}: {correct}/{total}")
        return updated

    def update_attendance(self, name: str, present: int, absent: int) -> Student | None:
        student = self.find_student_by_name(name)
        if student is None:
            return None

        def apply(s: Student) -> None:
            s.attendance = Attendance(
                present=int(present), absent=int(absent), total_days=int(present) + int(absent)
            )

        return self._update_student(student.id, apply)

    # =========================================================================
    # ESTATISTICAS
    # =========================================================================

    def class_stats(self, class_name: str | None = None) -> ClassStats | None:
        """Medias (percentuais) por materia. None se a turma nao tem alunos."""
        students = self.all_students()
        if class_name:
            students = [s for s in students if s.class_name == class_name]
        if not students:
            return None

        totals: dict[str, list[float]] = {}
        for student in students:
            for grade in student.grades:
                totals.setdefault(grade.subject, []).append(grade.percentage)

        return ClassStats(
            class_name=class_name or "All Classes",
            total_students=len(students),
            subject_averages={
                subject: round(sum(values) / len(values), 1) for subject, values in totals.items()
            },
        )

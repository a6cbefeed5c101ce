"""Registration - Cadastro de alunos, professores e responsaveis."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel

from core.logger import get_logger

from .database import StudentDatabase, load_records
from .models import Parent, RegistrationResult, Student, Teacher

logger = get_logger("records.registration")

DIVIDER = "━" * 20

UserType = Literal["student", "teacher", "parent", "unknown"]


class UserLookup(BaseModel):
    type: UserType
    data: Student | Teacher | Parent | None = None


def generate_id(prefix: str, existing_ids: list[str]) -> str:
    """Proximo ID sequencial: "001", "T001", "P001"."""
    max_num = 0
    for existing in existing_ids:
        number = existing[len(prefix):] if existing.startswith(prefix) else existing
        if re.fullmatch(r"\d+", number or ""):
            max_num = max(max_num, int(number))
    return f"{prefix}{max_num + 1:03d}"


class RegistrationService:
    """Cadastro sobre o StudentDatabase (mesmos arquivos JSON).

    Duplicidade: aluno/professor por telefone ou nome, responsavel por
    telefone, verificada e gravada sob `db.write_lock`. Mensagens retornadas
    ja formatadas para o WhatsApp.
    """

    def __init__(self, database: StudentDatabase):
        self.db = database

    def register_student(
        self, name: str, phone: str, class_name: str, parent_phone: str
    ) -> RegistrationResult:
        with self.db.write_lock:
            return self._add_student(name, phone, class_name, parent_phone)

    def register_teacher(
        self, name: str, phone: str, subjects: list[str], classes: list[str] | None = None
    ) -> RegistrationResult:
        with self.db.write_lock:
            return self._add_teacher(name, phone, subjects, classes)

    def register_parent(
        self, name: str, phone: str, children_names: list[str] | str
    ) -> RegistrationResult:
        with self.db.write_lock:
            return self._add_parent(name, phone, children_names)

    def _add_student(
        self, name: str, phone: str, class_name: str, parent_phone: str
    ) -> RegistrationResult:
        raw = self.db.students.read(strict=True)
        students: list[Student] = load_records(Student, raw, strict=True)

        existing = next(
            (s for s in students if s.phone == phone or s.name.lower() == name.strip().lower()),
            None,
        )
        if existing:
            return RegistrationResult(
                success=False,
                message=(
                    "❌ Student already registered!\n\n"
                    f"Name: {existing.name}\n"
                    f"Class: {existing.class_name}\n"
                    f"Student ID: {existing.id}"
                ),
                record=existing,
            )

        student = Student(
            id=generate_id("", [s.id for s in students]),
            name=name.strip(),
            phone=phone.strip(),
            class_name=class_name.strip(),
            parent_phone=parent_phone.strip(),
        )
        self.db.save_students(students + [student])
        logger.info(f"Aluno registrado: {student.name} ({student.id})")

        return RegistrationResult(
            success=True,
            message=(
                f"✅ *STUDENT REGISTERED*\n{DIVIDER}\n\n"
                f"👤 Name: *{student.name}*\n"
                f"🎓 Class: *{student.class_name}*\n"
                f"📱 Phone: {student.phone}\n"
                f"👨‍👩‍👧 Parent: {student.parent_phone}\n"
                f"🆔 Student ID: *{student.id}*\n\n"
                "You can now check performance and take quizzes!"
            ),
            record=student,
        )

    def _add_teacher(
        self, name: str, phone: str, subjects: list[str], classes: list[str] | None = None
    ) -> RegistrationResult:
        teachers: list[Teacher] = load_records(
            Teacher, self.db.teachers.read(strict=True), strict=True
        )

        existing = next(
            (t for t in teachers if t.phone == phone or t.name.lower() == name.strip().lower()),
            None,
        )
        if existing:
            return RegistrationResult(
                success=False,
                message=(
                    "❌ Teacher already registered!\n\n"
                    f"Name: {existing.name}\n"
                    f"Teacher ID: {existing.id}"
                ),
                record=existing,
            )

        teacher = Teacher(
            id=generate_id("T", [t.id for t in teachers]),
            name=name.strip(),
            phone=phone.strip(),
            subjects=[s for s in subjects if s],
            classes=list(classes or []),
        )
        self.db.teachers.write([t.model_dump() for t in teachers + [teacher]])
        logger.info(f"Professor registrado: {teacher.name} ({teacher.id})")

        return RegistrationResult(
            success=True,
            message=(
                f"✅ *TEACHER REGISTERED*\n{DIVIDER}\n\n"
                f"👤 Name: *{teacher.name}*\n"
                f"📱 Phone: {teacher.phone}\n"
                f"📚 Subjects: {', '.join(teacher.subjects)}\n"
                f"🆔 Teacher ID: *{teacher.id}*\n\n"
                "You can now record grades and view class statistics!"
            ),
            record=teacher,
        )

    def _add_parent(
        self, name: str, phone: str, children_names: list[str] | str
    ) -> RegistrationResult:
        parents: list[Parent] = load_records(
            Parent, self.db.parents.read(strict=True), strict=True
        )

        if any(p.phone == phone for p in parents):
            return RegistrationResult(
                success=False,
                message=(
                    "❌ Parent already registered!\n\n"
                    'Use "Link child: [child name]" to add more children.'
                ),
            )

        if isinstance(children_names, str):
            children_names = [children_names]

        students = self.db.all_students()
        children_ids: list[str] = []
        found: list[str] = []
        not_found: list[str] = []
        for child_name in children_names:
            search = child_name.strip().lower()
            student = next((s for s in students if search and search in s.name.lower()), None)
            if student:
                children_ids.append(student.id)
                found.append(student.name)
            else:
                not_found.append(child_name.strip())

        if not children_ids:
            return RegistrationResult(
                success=False,
                message=(
                    "❌ No matching students found.\n\n"
                    "Please ensure students are registered first, or check the spelling."
                ),
            )

        parent = Parent(
            id=generate_id("P", [p.id for p in parents]),
            name=name.strip(),
            phone=phone.strip(),
            children=children_ids,
        )
        self.db.parents.write([p.model_dump() for p in parents + [parent]])
        logger.info(f"Responsavel registrado: {parent.name} ({parent.id})")

        message = (
            f"✅ *PARENT REGISTERED*\n{DIVIDER}\n\n"
            f"👤 Name: *{parent.name}*\n"
            f"📱 Phone: {parent.phone}\n"
            f"👨‍👩‍👧 Children linked: *{len(found)}*\n"
            f"🆔 Parent ID: *{parent.id}*\n\n"
            "*Linked children:*\n"
        )
        message += "".join(f"• {child}\n" for child in found)
        if not_found:
            message += f"\n⚠️ *Not found:* {', '.join(not_found)}"
        message += "\nYou can now check your children's performance!"

        return RegistrationResult(success=True, message=message, record=parent)

    def get_user_by_phone(self, phone: str) -> UserLookup:
        """Identifica o tipo de usuario pelo telefone (aluno > professor > responsavel)."""
        normalized = phone.replace("whatsapp:", "").strip()

        lookups: list[tuple[UserType, list[Any]]] = [
            ("student", self.db.all_students()),
            ("teacher", self.db.all_teachers()),
            ("parent", self.db.all_parents()),
        ]
        for user_type, records in lookups:
            match = next((r for r in records if r.phone == normalized), None)
            if match:
                return UserLookup(type=user_type, data=match)
        return UserLookup(type="unknown")

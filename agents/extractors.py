"""Extractors - Campos estruturados a partir do texto livre das mensagens."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

SUBJECT_KEYWORDS: list[tuple[str, str]] = [
    ("mathematics", "Mathematics"),
    ("maths", "Mathematics"),
    ("math", "Mathematics"),
    ("english", "English"),
    ("science", "Science"),
    ("kiswahili", "Kiswahili"),
]
DEFAULT_SUBJECT = "Mathematics"

PHONE = r"(\+?254\d{9})"

NAME_PATTERNS = [
    re.compile(r"check\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)", re.IGNORECASE),
    re.compile(r"performance\s+(?:of|for)?\s*([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)", re.IGNORECASE),
    re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)'?s?\s+(?i:performance|grades|report)"),
]
NAME_STOP_WORDS = {
    "show", "check", "see", "view", "get", "me", "the", "of", "for", "my", "child",
    "performance", "grades", "grade", "report", "results", "on", "how", "is",
}

GRADE_PREFIX = re.compile(r"^\s*record\s+grades?\s*:?\s*", re.IGNORECASE)
GRADE_PATTERN = re.compile(r"([A-Za-z\s]+?)\s+([A-Za-z]+)\s+(\d+)(?:\s*/\s*(\d+))?")

STUDENT_PATTERNS = [
    re.compile(r"register\s+(?:as\s+)?student:?\s*([^,]+),\s*([^,]+),\s*" + PHONE, re.IGNORECASE),
    re.compile(r"student:?\s*([^,]+),\s*([^,]+),\s*" + PHONE, re.IGNORECASE),
]
TEACHER_PATTERNS = [
    re.compile(r"register\s+(?:as\s+)?teacher:?\s*([^,]+),\s*(.+)", re.IGNORECASE),
    re.compile(r"teacher:?\s*([^,]+),\s*(.+)", re.IGNORECASE),
]
PARENT_PATTERNS = [
    re.compile(
        r"register\s+(?:as\s+)?parent:?\s*([^,]+),\s*" + PHONE + r",?\s*(?:for|child:?)\s*([^,]+)",
        re.IGNORECASE,
    ),
    re.compile(r"parent:?\s*([^,]+),\s*" + PHONE + r",?\s*(?:for|child:?)\s*([^,]+)", re.IGNORECASE),
]
PARENT_FOR_CHILD = re.compile(r"register\s+(?:as\s+)?parent\s+for\s+([A-Za-z\s]+)", re.IGNORECASE)


@dataclass
class GradeRecord:
    student_name: str
    subject: str
    score: int
    total: int = 100


@dataclass
class StudentRegistration:
    name: str
    class_name: str
    parent_phone: str


@dataclass
class TeacherRegistration:
    name: str
    subjects: list[str] = field(default_factory=list)


@dataclass
class ParentRegistration:
    child_name: str
    name: str | None = None
    phone: str | None = None


def extract_subject(message: str) -> str:
    """Materia citada na mensagem (Mathematics quando nenhuma)."""
    lowered = message.lower()
    for keyword, subject in SUBJECT_KEYWORDS:
        if keyword in lowered:
            return subject
    return DEFAULT_SUBJECT


def _clean_name(raw: str) -> str | None:
    words = [w for w in raw.replace("'s", " ").split() if w]
    while words and words[0].lower() in NAME_STOP_WORDS:
        words.pop(0)
    while words and words[-1].lower() in NAME_STOP_WORDS:
        words.pop()
    return " ".join(words) or None


def extract_student_name(message: str) -> str | None:
    """Nome do aluno em pedidos como "Check Amina performance"."""
    for pattern in NAME_PATTERNS:
        match = pattern.search(message)
        if match:
            name = _clean_name(match.group(1))
            if name:
                return name
    return None


def parse_grade_recording(message: str) -> list[GradeRecord]:
    """ "Record grades: Amina Math 85, John English 78/80" -> lista de notas."""
    body = GRADE_PREFIX.sub("", message)
    records = []
    for chunk in re.split(r"[,;\n]", body):
        match = GRADE_PATTERN.search(chunk)
        if not match:
            continue
        name = match.group(1).strip()
        if not name:
            continue
        records.append(
            GradeRecord(
                student_name=name,
                subject=match.group(2).strip(),
                score=int(match.group(3)),
                total=int(match.group(4)) if match.group(4) else 100,
            )
        )
    return records


def parse_student_registration(message: str) -> StudentRegistration | None:
    for pattern in STUDENT_PATTERNS:
        match = pattern.search(message)
        if match:
            return StudentRegistration(
                name=match.group(1).strip(),
                class_name=match.group(2).strip(),
                parent_phone=match.group(3).strip(),
            )
    return None


def parse_teacher_registration(message: str) -> TeacherRegistration | None:
    for pattern in TEACHER_PATTERNS:
        match = pattern.search(message)
        if match:
            subjects = [s.strip() for s in re.split(r"\s*(?:,|\band\b)\s*", match.group(2))]
            return TeacherRegistration(
                name=match.group(1).strip(), subjects=[s for s in subjects if s]
            )
    return None


def parse_parent_registration(message: str) -> ParentRegistration | None:
    """Formato completo ou apenas "Register parent for <filho>"."""
    for pattern in PARENT_PATTERNS:
        match = pattern.search(message)
        if match:
            return ParentRegistration(
                name=match.group(1).strip(),
                phone=match.group(2).strip(),
                child_name=match.group(3).strip(),
            )

    match = PARENT_FOR_CHILD.search(message)
    if match:
        return ParentRegistration(child_name=match.group(1).strip())
    return None

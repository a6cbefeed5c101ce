"""Records - Registros escolares em arquivos JSON."""

from .database import ClassStats, StudentDatabase
from .json_store import JsonRecordFile
from .models import Attendance, Grade, Parent, RegistrationResult, Student, Teacher
from .registration import RegistrationService, UserLookup, generate_id

__all__ = [
    "Attendance",
    "Grade",
    "Student",
    "Teacher",
    "Parent",
    "RegistrationResult",
    "ClassStats",
    "JsonRecordFile",
    "StudentDatabase",
    "RegistrationService",
    "UserLookup",
    "generate_id",
]

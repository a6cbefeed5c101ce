"""Agents module - Classificacao de intencao e tratamento de mensagens."""

from agents.extractors import (
    extract_student_name,
    extract_subject,
    parse_grade_recording,
    parse_parent_registration,
    parse_student_registration,
    parse_teacher_registration,
)
from agents.intent_classifier import (
    IntentClassifier,
    IntentLabel,
    classify_intent,
    fallback_intent,
)
from agents.message_handler import HandledMessage, MessageHandler

__all__ = [
    # Intent
    "IntentLabel",
    "IntentClassifier",
    "classify_intent",
    "fallback_intent",
    # Extractors
    "extract_subject",
    "extract_student_name",
    "parse_grade_recording",
    "parse_student_registration",
    "parse_teacher_registration",
    "parse_parent_registration",
    # Handler
    "MessageHandler",
    "HandledMessage",
]

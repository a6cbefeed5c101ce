"""Replies - Textos de resposta formatados para o WhatsApp."""

from __future__ import annotations

from quiz.engine.scoring_engine import QuizGradingEngine
from quiz.models import AnswerFeedback, GradingResult, PerformanceBand, QuizMode, QuizSession
from records.database import ClassStats
from records.models import Student
from records.registration import UserLookup

from agents.extractors import GradeRecord

DIVIDER = "━" * 20

EMPTY_MESSAGE = "❌ Empty message received. Please try again."
ERROR_APOLOGY = (
    "❌ Sorry, I encountered an error processing your message. "
    "Please try again or contact support."
)
NO_ACTIVE_QUIZ = "❌ No active quiz found. Send 'Quiz me on Math' to start a new quiz!"
QUIZ_EXPIRED = "⏰ Your quiz has expired. Send 'Quiz me on Math' to start a new quiz!"
STUDENT_NOT_FOUND = "❌ *Student not found*"
NO_STUDENTS = "❌ No students registered yet."

INVALID_STUDENT_REGISTRATION = (
    "❌ *Invalid format*\n\n*To register a student, use:*\n"
    '"Register student: Name, Class, Parent Phone"\n\n'
    "*Example:*\nRegister student: Amina Hassan, Form 2A, +254712345678"
)
INVALID_TEACHER_REGISTRATION = (
    "❌ *Invalid format*\n\n*To register as a teacher, use:*\n"
    '"Register teacher: Name, Subject(s)"\n\n'
    "*Example:*\nRegister teacher: Mr. John Kamau, Mathematics"
)
INVALID_PARENT_REGISTRATION = (
    "❌ *Invalid format*\n\n*To register as a parent, use:*\n"
    '"Register parent: Your Name, Your Phone, for Child Name"\n\n'
    "*Example:*\nRegister parent: Mrs. Fatuma Hassan, +254712345678, for Amina Hassan"
)
INVALID_GRADE_RECORDING = (
    "❌ *Could not parse grades*\n\n*Format:*\nRecord grades: Name Subject Score\n\n"
    "*Example:*\nRecord grades: Amina Math 85, John English 78"
)

BAND_EMOJI = {
    PerformanceBand.EXCELLENT: "🎉",
    PerformanceBand.GOOD: "👍",
    PerformanceBand.KEEP_TRYING: "💪",
}

_grading = QuizGradingEngine()


def _example_letters(count: int) -> list[str]:
    return ["ACBD"[i % 4] for i in range(count)]


def answer_format_example(count: int) -> str:
    """ "1A 2C 3B" para 3 questoes; letras ciclicas para outros tamanhos."""
    return " ".join(f"{i}{letter}" for i, letter in enumerate(_example_letters(count), start=1))


def single_letter_expected(question_number: int) -> str:
    return (
        "❌ This quiz takes one answer at a time.\n\n"
        f"Reply with a single letter (A-D) for question {question_number}."
    )


def wrong_answer_count(expected: int) -> str:
    bare = " ".join(_example_letters(expected))
    return (
        f"❌ Please provide {expected} answers.\n\n"
        f"*Format:* {answer_format_example(expected)}\n*Or:* {bare}"
    )


# =============================================================================
# QUIZ
# =============================================================================


def quiz_intro(session: QuizSession) -> str:
    header = f"📝 *{session.subject.upper()} QUIZ*\n{DIVIDER}\n\n"

    if session.mode == QuizMode.INCREMENTAL:
        first = session.current_question
        return (
            header
            + (first.render() if first else "")
            + f"\n\n💡 *Reply with one letter* (A-D). {session.total_questions} questions in total."
        )

    questions = "\n\n".join(question.render() for question in session.questions)
    return (
        header
        + questions
        + f"\n\n💡 *Reply with your answers*\nFormat: {answer_format_example(session.total_questions)}"
    )


def band_feedback(result: GradingResult) -> str:
    band = _grading.performance_band(result.percentage)
    if band == PerformanceBand.EXCELLENT:
        return f"🌟 Excellent work! You're mastering {result.subject}!"
    if band == PerformanceBand.GOOD:
        return "👍 Good job! Keep practicing to improve further."
    return "💪 Keep trying! Practice makes perfect. Request another quiz to improve!"


def quiz_results(result: GradingResult) -> str:
    emoji = BAND_EMOJI[_grading.performance_band(result.percentage)]
    lines = [
        f"{emoji} *QUIZ RESULTS*",
        DIVIDER,
        "",
        f"📊 *Score:* {result.correct_count}/{result.total_questions} ({result.percentage}%)",
        "",
        "*Answer Breakdown:*",
    ]
    for item in result.results:
        icon = "✅" if item.is_correct else "❌"
        line = f"{icon} Question {item.question_number}: {item.user_answer}"
        if not item.is_correct:
            line += f" (Correct: {item.correct_answer})"
        lines.append(line)
    lines.append("")
    lines.append(band_feedback(result))
    return "\n".join(lines)


def answer_feedback(feedback: AnswerFeedback) -> str:
    text = "✅ Correct!" if feedback.is_correct else f"❌ Wrong! Correct answer: {feedback.correct_answer}"

    if feedback.finished and feedback.result is not None:
        result = feedback.result
        return (
            f"{text}\n\n🎉 Quiz finished! Score: {result.correct_count}/{result.total_questions} "
            f"({result.percentage}%)\n\n{band_feedback(result)}"
        )

    if feedback.next_question is not None:
        return f"{text}\n\n{feedback.next_question.render()}"
    return text


# =============================================================================
# RECORDS
# =============================================================================


def _grade_emoji(percentage: float) -> str:
    if percentage >= 80:
        return "🟢"
    if percentage >= 70:
        return "🟡"
    if percentage >= 50:
        return "🟠"
    return "🔴"


def performance_report(student: Student | None) -> str:
    if student is None:
        return STUDENT_NOT_FOUND

    report = f"📊 *PERFORMANCE REPORT*\n{DIVIDER}\n\n"
    report += f"👤 *Name:* {student.name}\n🎓 *Class:* {student.class_name}\n\n"
    report += f"📚 *RECENT GRADES*\n{DIVIDER}\n"

    if not student.grades:
        report += "No grades recorded yet.\n"
    for grade in student.grades[-5:]:
        report += (
            f"{_grade_emoji(grade.percentage)} *{grade.subject}:* "
            f"{grade.score}/{grade.total} ({grade.percentage:.0f}%)\n"
        )

    average = student.average_percentage()
    attendance = student.attendance.rate
    report += f"\n📈 *STATISTICS*\n{DIVIDER}\n"
    report += f"• Average: *{average:.1f}%*\n" if average is not None else "• Average: *N/A*\n"
    report += f"• Attendance: *{attendance:.1f}%*\n" if attendance is not None else "• Attendance: *N/A*\n"
    return report


def grades_recorded(records: list[GradeRecord], failed: list[str]) -> str:
    recorded = len(records) - len(failed)
    response = f"✅ *GRADES RECORDED*\n{DIVIDER}\n\n"
    response += f"Successfully recorded: *{recorded}* grade(s)\n\n"
    for record in records:
        emoji = "❌" if record.student_name in failed else "✅"
        response += f"{emoji} {record.student_name}: {record.subject} = {record.score}/{record.total}\n"
    if failed:
        response += f"\n⚠️ *Failed:* {', '.join(failed)} (student not found)"
    return response


def class_stats_reply(stats: ClassStats | None) -> str:
    if stats is None:
        return NO_STUDENTS

    response = f"📊 *CLASS STATISTICS*\n{DIVIDER}\n\n"
    if stats.class_name != "All Classes":
        response += f"🎓 Class: *{stats.class_name}*\n"
    response += f"👥 Total Students: *{stats.total_students}*\n\n"
    response += "📚 *Subject Averages:*\n"
    if not stats.subject_averages:
        response += "No grades recorded yet.\n"
    for subject, average in stats.subject_averages.items():
        response += f"• {subject}: {average:.1f}%\n"
    return response


def help_text(user: UserLookup) -> str:
    if user.type != "unknown" and user.data is not None:
        response = f"👋 *Welcome back, {user.data.name}!*\n{DIVIDER}\n\n"
        response += f"You're registered as: *{user.type.upper()}*\n\n"
    else:
        response = f"👋 *Welcome to Mwalimu AI!*\n{DIVIDER}\n\n"
        response += "🆕 *NEW USER?* Register first:\n\n"
        response += '📝 *Students:*\n"Register student: Name, Class, Parent Phone"\n\n'
        response += '👨‍🏫 *Teachers:*\n"Register teacher: Name, Subject"\n\n'
        response += '👨‍👩‍👧 *Parents:*\n"Register parent: Name, Phone, for Child"\n\n'
        response += f"{DIVIDER}\n\n"

    response += (
        "*I can help with:*\n\n"
        '📊 *For Parents:*\n"Check [name] performance"\n"Show [name] grades"\n\n'
        '📝 *For Students:*\n"Quiz me on Math"\n"Practice Science questions"\n\n'
        '✍️ *For Teachers:*\n"Record grades: Name Subject Score"\n\n'
        '📈 *For Admins:*\n"Show class statistics"\n\n'
        "💡 *Just send me a message!*"
    )
    return response

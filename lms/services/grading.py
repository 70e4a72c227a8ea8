"""
Auto-grading and score aggregation for assessment submissions, plus the
late-penalty arithmetic for assignments.

Everything here is pure: no session, no I/O. The submission service feeds in
ORM questions and pydantic answers and persists whatever comes back.
"""
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime, timezone
from typing import Iterable, Optional

from lms.core.constants import CHOICE_QUESTION_TYPES, QuestionTypeEnum
from lms.schemas.assessment_submission import AnswerSubmit, GradedAnswer


@dataclass(frozen=True)
class ScoreSummary:
    score: float
    percentage: int
    passed: bool


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round .5 upwards
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _grade_choice(answer: AnswerSubmit, question) -> GradedAnswer:
    correct_option = question.correct_option
    is_correct = (
        correct_option is not None
        and isinstance(answer.answer, str)
        and answer.answer == correct_option.get("text")
    )
    return GradedAnswer(
        question_id=answer.question_id,
        answer=answer.answer,
        is_correct=is_correct,
        points_awarded=question.points if is_correct else 0,
    )


def _grade_short_answer(answer: AnswerSubmit, question) -> GradedAnswer:
    if not question.correct_answer:
        # No key: left for the teacher
        return GradedAnswer(question_id=answer.question_id, answer=answer.answer)

    is_correct = (
        isinstance(answer.answer, str)
        and answer.answer.strip().lower() == question.correct_answer.strip().lower()
    )
    return GradedAnswer(
        question_id=answer.question_id,
        answer=answer.answer,
        is_correct=is_correct,
        points_awarded=question.points if is_correct else 0,
    )


def _grade_essay(answer: AnswerSubmit, question) -> GradedAnswer:
    return GradedAnswer(question_id=answer.question_id, answer=answer.answer, points_awarded=0)


def grade_answer(answer: AnswerSubmit, question: Optional[object]) -> GradedAnswer:
    """
    Grade a single submitted answer against its question definition.

    An answer whose question_id matches no question is passed through
    ungraded rather than rejected.
    """
    if question is None:
        return GradedAnswer(question_id=answer.question_id, answer=answer.answer)

    if question.type in CHOICE_QUESTION_TYPES:
        return _grade_choice(answer, question)
    if question.type == QuestionTypeEnum.SHORT_ANSWER:
        return _grade_short_answer(answer, question)
    if question.type == QuestionTypeEnum.ESSAY:
        return _grade_essay(answer, question)
    raise ValueError(f"Unsupported question type: {question.type}")


def grade_answers(answers: Iterable[AnswerSubmit], questions_by_id: dict) -> list[GradedAnswer]:
    return [grade_answer(answer, questions_by_id.get(answer.question_id)) for answer in answers]


def calculate_score(points_awarded: Iterable[Optional[float]], total_points: float, passing_score: float) -> ScoreSummary:
    score = sum(points or 0 for points in points_awarded)
    percentage = round_half_up(score / total_points * 100) if total_points else 0
    return ScoreSummary(score=score, percentage=percentage, passed=percentage >= passing_score)


def ensure_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored here is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_time_spent(started_at: datetime, submitted_at: datetime) -> int:
    """Minutes between start and submission, rounded half up."""
    elapsed = ensure_utc(submitted_at) - ensure_utc(started_at)
    return round_half_up(elapsed.total_seconds() / 60)


def days_late(due_date: datetime, submitted_at: datetime) -> int:
    """Whole days past the due date, any part of a day counting as one."""
    overdue = ensure_utc(submitted_at) - ensure_utc(due_date)
    if overdue.total_seconds() <= 0:
        return 0
    return math.ceil(overdue.total_seconds() / 86400)


def apply_late_penalty(grade: float, penalty_percent: float, days: int) -> tuple[float, float]:
    """
    Deduct penalty_percent of the grade for every day late.

    Returns (final_grade, deducted). The final grade never drops below zero.
    """
    if days <= 0 or not penalty_percent:
        return grade, 0.0
    deducted = penalty_percent / 100 * grade * days
    final_grade = max(0.0, grade - deducted)
    return final_grade, grade - final_grade

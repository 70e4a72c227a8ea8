import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.constants import (
    AssessmentStatusEnum,
    SCORE_BUCKETS,
    SUBMITTED_AND_GRADED_MESSAGE,
    SUBMITTED_PENDING_REVIEW_MESSAGE,
    SubmissionStatusEnum,
)
from lms.core.exceptions import (
    AttemptLimitExceeded,
    ConflictError,
    NotEnrolledError,
    NotFoundError,
    SubmissionClosedError,
    ValidationFailure,
)
from lms.crud.assessment import assessment as crud_assessment
from lms.crud.assessment_submission import assessment_submission as crud_submission
from lms.crud.course_enrollment import course_enrollment as crud_enrollment
from lms.crud.user import user as crud_user
from lms.models.assessment import Assessment
from lms.models.assessment_submission import AssessmentSubmission, SubmissionAnswer
from lms.schemas.analytics import AssessmentAnalytics
from lms.schemas.assessment_submission import GradeSubmission, GradedAnswer, SubmitAssessment
from lms.schemas.user import UserContext
from lms.services import grading
from lms.services.notification import notification_dispatcher
from lms.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssessmentSubmissionService:

    def _get_assessment_or_404(self, db: Session, assessment_id: int) -> Assessment:
        assessment = crud_assessment.get(db, id=assessment_id)
        if not assessment:
            raise NotFoundError("Assessment not found")
        return assessment

    def _get_submission_or_404(self, db: Session, submission_id: int) -> AssessmentSubmission:
        submission = crud_submission.get(db, id=submission_id)
        if not submission:
            raise NotFoundError("Submission not found")
        return submission

    def _require_active_enrollment(self, db: Session, current_user_context: UserContext, assessment: Assessment):
        enrollment = crud_enrollment.get_active_by_student_and_course(
            db,
            student_id=current_user_context.user.id,
            course_id=assessment.course_id
        )
        if not enrollment:
            raise NotEnrolledError()

    def _require_published(self, assessment: Assessment):
        # Drafts are invisible to students, so they 404 like the GET does
        if assessment.status == AssessmentStatusEnum.DRAFT:
            raise NotFoundError("Assessment not found")
        if assessment.status == AssessmentStatusEnum.ARCHIVED:
            raise SubmissionClosedError("This assessment is archived and no longer accepts submissions")

    def _require_submission_window(self, assessment: Assessment, now: datetime):
        if assessment.allow_late_submission:
            return
        if now > grading.ensure_utc(assessment.due_date):
            raise SubmissionClosedError("The due date for this assessment has passed")

    def _require_attempts_remaining(self, assessment: Assessment, prior_attempts: int):
        if prior_attempts >= assessment.attempts_allowed:
            raise AttemptLimitExceeded(assessment.attempts_allowed)

    def _resolve_started_at(self, submission_in: SubmitAssessment, now: datetime) -> datetime:
        if submission_in.started_at is None:
            return now
        started_at = grading.ensure_utc(submission_in.started_at)
        if started_at > now:
            raise ValidationFailure("started_at cannot be in the future")
        return started_at

    def _apply_score(self, submission: AssessmentSubmission, assessment: Assessment):
        summary = grading.calculate_score(
            (answer.points_awarded for answer in submission.answers),
            assessment.total_points,
            assessment.passing_score
        )
        submission.score = summary.score
        submission.percentage = summary.percentage
        submission.passed = summary.passed
        if submission.submitted_at is not None:
            submission.time_spent = grading.calculate_time_spent(submission.started_at, submission.submitted_at)

    def _build_answers(self, graded_answers: List[GradedAnswer]) -> List[SubmissionAnswer]:
        return [SubmissionAnswer(**answer.model_dump()) for answer in graded_answers]

    def submit_assessment(
        self,
        db: Session,
        assessment_id: int,
        submission_in: SubmitAssessment,
        current_user_context: UserContext
    ) -> Tuple[AssessmentSubmission, str]:
        permission_helper.require_student(current_user_context)
        assessment = self._get_assessment_or_404(db, assessment_id)
        student_id = current_user_context.user.id

        self._require_published(assessment)
        self._require_active_enrollment(db, current_user_context, assessment)

        now = utcnow()
        self._require_submission_window(assessment, now)

        prior_attempts = crud_submission.count_by_student_and_assessment(
            db, student_id=student_id, assessment_id=assessment.id
        )
        self._require_attempts_remaining(assessment, prior_attempts)

        started_at = self._resolve_started_at(submission_in, now)
        graded_answers = grading.grade_answers(submission_in.answers, assessment.question_map())

        submission = AssessmentSubmission(
            assessment_id=assessment.id,
            student_id=student_id,
            attempt_number=prior_attempts + 1,
            started_at=started_at,
            submitted_at=now,
            status=SubmissionStatusEnum.SUBMITTED,
            answers=self._build_answers(graded_answers),
        )
        self._apply_score(submission, assessment)

        if not assessment.has_essay_questions:
            submission.status = SubmissionStatusEnum.GRADED
            submission.graded_at = now

        db.add(submission)
        try:
            db.flush()
        except IntegrityError:
            # A concurrent submit claimed this attempt number first
            db.rollback()
            logger.warning(
                f"Attempt {prior_attempts + 1} for student {student_id} on assessment {assessment_id} lost an insert race"
            )
            current_attempts = crud_submission.count_by_student_and_assessment(
                db, student_id=student_id, assessment_id=assessment_id
            )
            attempts_allowed = assessment.attempts_allowed
            if current_attempts >= attempts_allowed:
                raise AttemptLimitExceeded(attempts_allowed)
            raise ConflictError("Another submission for this assessment is in progress, please retry")

        message = (
            SUBMITTED_AND_GRADED_MESSAGE
            if submission.status == SubmissionStatusEnum.GRADED
            else SUBMITTED_PENDING_REVIEW_MESSAGE
        )
        logger.info(
            f"Student {student_id} submitted attempt {submission.attempt_number} for assessment {assessment.id}: "
            f"{submission.percentage}% ({submission.status.value})"
        )
        return submission, message

    def grade_submission(
        self,
        db: Session,
        submission_id: int,
        grade_in: GradeSubmission,
        current_user_context: UserContext,
        background_tasks: Optional[BackgroundTasks] = None
    ) -> AssessmentSubmission:
        permission_helper.require_teacher(current_user_context)
        submission = self._get_submission_or_404(db, submission_id)
        assessment = submission.assessment
        permission_helper.require_assessment_owner(
            current_user_context, assessment, "Not authorized to grade this submission"
        )

        if grade_in.answers is not None:
            submission.answers = self._build_answers(grade_in.answers)
        if grade_in.teacher_comments is not None:
            submission.teacher_comments = grade_in.teacher_comments

        now = utcnow()
        submission.status = SubmissionStatusEnum.GRADED
        submission.graded_by_id = current_user_context.user.id
        submission.graded_at = now
        self._apply_score(submission, assessment)
        db.flush()

        logger.info(
            f"Teacher {current_user_context.user.id} graded submission {submission.id}: {submission.percentage}%"
        )

        if background_tasks is not None:
            teacher = crud_user.get(db, id=current_user_context.user.id)
            notification_dispatcher.schedule_graded(
                background_tasks,
                student=submission.student,
                assessment=assessment,
                submission=submission,
                teacher=teacher
            )
        return submission

    def get_assessment_submissions(
        self, db: Session, assessment_id: int, current_user_context: UserContext
    ) -> List[AssessmentSubmission]:
        permission_helper.require_teacher(current_user_context)
        assessment = self._get_assessment_or_404(db, assessment_id)
        permission_helper.require_assessment_owner(
            current_user_context, assessment, "Not authorized to view these submissions"
        )
        return crud_submission.get_all_by_assessment(db, assessment_id=assessment.id)

    def get_my_submissions(self, db: Session, current_user_context: UserContext) -> List[AssessmentSubmission]:
        permission_helper.require_student(current_user_context)
        return crud_submission.get_all_by_student(db, student_id=current_user_context.user.id)

    def get_latest_submission(self, db: Session, assessment_id: int, student_id: int) -> Optional[AssessmentSubmission]:
        return crud_submission.get_latest_by_student_and_assessment(
            db, student_id=student_id, assessment_id=assessment_id
        )

    def get_assessment_analytics(
        self, db: Session, assessment_id: int, current_user_context: UserContext
    ) -> AssessmentAnalytics:
        permission_helper.require_teacher(current_user_context)
        assessment = self._get_assessment_or_404(db, assessment_id)
        permission_helper.require_assessment_owner(
            current_user_context, assessment, "Not authorized to view analytics"
        )

        submissions = crud_submission.get_graded_by_assessment(db, assessment_id=assessment.id)
        return build_analytics(assessment.id, submissions)


def _in_bucket(percentage: int, lower: Optional[int], upper: Optional[int]) -> bool:
    if lower is not None and percentage < lower:
        return False
    if upper is not None and percentage >= upper:
        return False
    return True


def build_analytics(assessment_id: int, submissions: List[AssessmentSubmission]) -> AssessmentAnalytics:
    """
    Aggregate statistics over graded submissions.

    Every average divides by at least 1 so an assessment nobody has taken
    reports zeros. highest/lowest fall back to 0 and 100 respectively.
    """
    total = len(submissions)
    denominator = total or 1
    percentages = [sub.percentage or 0 for sub in submissions]

    return AssessmentAnalytics(
        assessment_id=assessment_id,
        total_submissions=total,
        average_score=sum(percentages) / denominator,
        highest_score=max(percentages + [0]),
        lowest_score=min(percentages + [100]),
        pass_rate=sum(1 for sub in submissions if sub.passed) / denominator * 100,
        score_distribution={
            label: sum(1 for p in percentages if _in_bucket(p, lower, upper))
            for label, lower, upper in SCORE_BUCKETS
        },
        average_time_spent=sum(sub.time_spent or 0 for sub in submissions) / denominator,
    )


assessment_submission_service = AssessmentSubmissionService()

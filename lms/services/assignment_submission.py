import logging
from typing import List, Optional, Tuple

from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.constants import (
    ASSIGNMENT_SUBMITTED_LATE_MESSAGE,
    ASSIGNMENT_SUBMITTED_MESSAGE,
    AssignmentStatusEnum,
    AssignmentSubmissionStatusEnum,
    SubmissionTypeEnum,
)
from lms.core.exceptions import ForbiddenError, NotEnrolledError, NotFoundError, SubmissionClosedError, ValidationFailure
from lms.crud.assignment import assignment as crud_assignment
from lms.crud.assignment_submission import assignment_submission as crud_submission
from lms.crud.course_enrollment import course_enrollment as crud_enrollment
from lms.crud.grade import grade as crud_grade
from lms.crud.user import user as crud_user
from lms.models.assignment import Assignment
from lms.models.assignment_submission import AssignmentSubmission
from lms.models.grade import Grade
from lms.schemas.assignment import dump_file_links
from lms.schemas.assignment_submission import GradeAssignmentSubmission, SubmitAssignment
from lms.schemas.user import UserContext
from lms.services import grading
from lms.services.assessment_submission import utcnow
from lms.services.notification import notification_dispatcher
from lms.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)

DUPLICATE_SUBMISSION_MESSAGE = "You have already submitted this assignment"


def require_grade_in_range(grade: float, total_points: float):
    if grade < 0 or grade > total_points:
        raise ValidationFailure(f"Grade must be between 0 and {total_points:g}")


class AssignmentSubmissionService:

    def _get_assignment_or_404(self, db: Session, assignment_id: int) -> Assignment:
        assignment = crud_assignment.get(db, id=assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def _get_submission_or_404(self, db: Session, submission_id: int) -> AssignmentSubmission:
        submission = crud_submission.get(db, id=submission_id)
        if not submission:
            raise NotFoundError("Submission not found")
        return submission

    def _require_open(self, assignment: Assignment):
        # Students never see drafts
        if assignment.status == AssignmentStatusEnum.DRAFT:
            raise NotFoundError("Assignment not found")
        if assignment.status == AssignmentStatusEnum.CLOSED:
            raise SubmissionClosedError("This assignment is closed for submissions")

    def _require_content(self, assignment: Assignment, submission_in: SubmitAssignment):
        has_text = bool(submission_in.text_submission and submission_in.text_submission.strip())
        has_files = bool(submission_in.files)

        if assignment.submission_type == SubmissionTypeEnum.TEXT:
            if not has_text:
                raise ValidationFailure("This assignment requires a text submission")
            if has_files:
                raise ValidationFailure("This assignment does not accept files")
        elif assignment.submission_type == SubmissionTypeEnum.FILE:
            if not has_files:
                raise ValidationFailure("This assignment requires at least one file")
            if has_text:
                raise ValidationFailure("This assignment does not accept a text submission")
        elif not (has_text or has_files):
            raise ValidationFailure("Submission must include text or files")

    def submit_assignment(
        self, db: Session, submission_in: SubmitAssignment, current_user_context: UserContext
    ) -> Tuple[AssignmentSubmission, str]:
        permission_helper.require_student(current_user_context)
        assignment = self._get_assignment_or_404(db, submission_in.assignment_id)
        student_id = current_user_context.user.id

        self._require_open(assignment)
        enrollment = crud_enrollment.get_active_by_student_and_course(
            db, student_id=student_id, course_id=assignment.course_id
        )
        if not enrollment:
            raise NotEnrolledError()

        if crud_submission.get_by_student_and_assignment(db, student_id=student_id, assignment_id=assignment.id):
            raise ValidationFailure(DUPLICATE_SUBMISSION_MESSAGE)

        now = utcnow()
        is_late = now > grading.ensure_utc(assignment.due_date)
        if is_late and not assignment.allow_late_submission:
            raise SubmissionClosedError("Late submissions are not allowed for this assignment")

        self._require_content(assignment, submission_in)

        submission = AssignmentSubmission(
            assignment_id=assignment.id,
            student_id=student_id,
            text_submission=submission_in.text_submission,
            files=dump_file_links(submission_in.files),
            submitted_at=now,
            is_late=is_late,
            status=AssignmentSubmissionStatusEnum.SUBMITTED,
        )
        db.add(submission)
        try:
            db.flush()
        except IntegrityError:
            # A concurrent request from the same student won the insert
            db.rollback()
            logger.warning(f"Duplicate submission by student {student_id} for assignment {assignment.id}")
            raise ValidationFailure(DUPLICATE_SUBMISSION_MESSAGE)

        logger.info(
            f"Student {student_id} submitted assignment {assignment.id}" + (" (late)" if is_late else "")
        )
        message = ASSIGNMENT_SUBMITTED_LATE_MESSAGE if is_late else ASSIGNMENT_SUBMITTED_MESSAGE
        return submission, message

    def grade_submission(
        self,
        db: Session,
        submission_id: int,
        grade_in: GradeAssignmentSubmission,
        current_user_context: UserContext,
        background_tasks: Optional[BackgroundTasks] = None
    ) -> AssignmentSubmission:
        """
        Grade a submission, deducting the late penalty and recording the
        result in the grade book.

        The penalty is late_submission_penalty percent of the raw grade for
        every started day past the due date. Regrading replaces the previous
        grade and grade book score.
        """
        permission_helper.require_teacher(current_user_context)
        submission = self._get_submission_or_404(db, submission_id)
        assignment = submission.assignment
        permission_helper.require_assignment_owner(
            current_user_context, assignment, "Not authorized to grade this submission"
        )
        require_grade_in_range(grade_in.grade, assignment.total_points)

        final_grade, deducted = grade_in.grade, 0.0
        if submission.is_late:
            days = grading.days_late(assignment.due_date, submission.submitted_at)
            final_grade, deducted = grading.apply_late_penalty(grade_in.grade, assignment.late_submission_penalty, days)

        submission.grade = final_grade
        submission.late_penalty = deducted
        submission.feedback = grade_in.feedback
        submission.status = AssignmentSubmissionStatusEnum.GRADED
        submission.graded_by_id = current_user_context.user.id
        submission.graded_at = utcnow()
        self._record_grade(db, submission)
        db.flush()

        logger.info(
            f"Teacher {current_user_context.user.id} graded assignment submission {submission.id}: "
            f"{final_grade:g}/{assignment.total_points:g} (late penalty {deducted:g})"
        )

        if background_tasks is not None:
            notification_dispatcher.schedule_assignment_graded(
                background_tasks,
                student=submission.student,
                assignment=assignment,
                submission=submission,
                teacher=crud_user.get(db, id=current_user_context.user.id)
            )
        return submission

    def _record_grade(self, db: Session, submission: AssignmentSubmission) -> Grade:
        entry = crud_grade.get_by_student_and_assignment(
            db, student_id=submission.student_id, assignment_id=submission.assignment_id
        )
        if entry is None:
            entry = Grade(student_id=submission.student_id, assignment_id=submission.assignment_id)
            db.add(entry)
        entry.submission_id = submission.id
        entry.score = submission.grade
        entry.feedback = submission.feedback
        return entry

    def get_submission(self, db: Session, submission_id: int, current_user_context: UserContext) -> AssignmentSubmission:
        submission = self._get_submission_or_404(db, submission_id)
        is_own = submission.student_id == current_user_context.user.id
        is_grader = (
            permission_helper.is_teacher(current_user_context)
            and permission_helper.is_assignment_owner(current_user_context, submission.assignment)
        )
        if not (is_own or is_grader):
            raise ForbiddenError("Not authorized to view this submission")
        return submission

    def delete_submission(self, db: Session, submission_id: int, current_user_context: UserContext) -> int:
        permission_helper.require_student(current_user_context)
        submission = self._get_submission_or_404(db, submission_id)
        if submission.student_id != current_user_context.user.id:
            raise ForbiddenError("Not authorized to delete this submission")
        if submission.status != AssignmentSubmissionStatusEnum.SUBMITTED:
            raise ValidationFailure("Cannot delete a graded submission")

        db.delete(submission)
        db.flush()
        logger.info(f"Student {current_user_context.user.id} withdrew assignment submission {submission_id}")
        return submission_id

    def get_assignment_submissions(
        self, db: Session, assignment_id: int, current_user_context: UserContext
    ) -> List[AssignmentSubmission]:
        permission_helper.require_teacher(current_user_context)
        assignment = self._get_assignment_or_404(db, assignment_id)
        permission_helper.require_assignment_owner(
            current_user_context, assignment, "Not authorized to view these submissions"
        )
        return crud_submission.get_all_by_assignment(db, assignment_id=assignment.id)

    def get_my_submissions(self, db: Session, current_user_context: UserContext) -> List[AssignmentSubmission]:
        permission_helper.require_student(current_user_context)
        return crud_submission.get_all_by_student(db, student_id=current_user_context.user.id)


assignment_submission_service = AssignmentSubmissionService()

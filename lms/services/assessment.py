import logging
import random
from typing import List, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from lms.core.constants import AssessmentStatusEnum
from lms.core.exceptions import NotFoundError
from lms.crud.assessment import assessment as crud_assessment
from lms.crud.course import course as crud_course
from lms.crud.course_enrollment import course_enrollment as crud_enrollment
from lms.crud.user import user as crud_user
from lms.models.assessment import Assessment
from lms.schemas.assessment import Assessment as AssessmentSchema, AssessmentCreate, AssessmentUpdate
from lms.schemas.assessment_submission import AssessmentDetail, AssessmentSubmission as SubmissionSchema
from lms.schemas.user import UserContext
from lms.services.assessment_submission import assessment_submission_service
from lms.services.notification import notification_dispatcher
from lms.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class AssessmentService:

    def _get_assessment_or_404(self, db: Session, assessment_id: int) -> Assessment:
        assessment = crud_assessment.get(db, id=assessment_id)
        if not assessment:
            raise NotFoundError("Assessment not found")
        return assessment

    def _require_owned_assessment(self, db: Session, assessment_id: int, current_user_context: UserContext, action: str) -> Assessment:
        permission_helper.require_teacher(current_user_context)
        assessment = self._get_assessment_or_404(db, assessment_id)
        permission_helper.require_assessment_owner(
            current_user_context, assessment, f"Not authorized to {action} this assessment"
        )
        return assessment

    def _student_view(self, assessment: Assessment, student_id: int, has_submitted: bool) -> AssessmentSchema:
        view = AssessmentSchema.model_validate(assessment)
        questions = list(view.questions)

        if not (assessment.show_answers_after_submission and has_submitted):
            questions = [q.without_answer_key() for q in questions]

        if assessment.shuffle_questions:
            # Stable per student so a reload shows the same order
            random.Random(f"{assessment.id}:{student_id}").shuffle(questions)

        return view.model_copy(update={"questions": questions})

    def create_assessment(
        self,
        db: Session,
        assessment_in: AssessmentCreate,
        current_user_context: UserContext,
        background_tasks: Optional[BackgroundTasks] = None
    ) -> Assessment:
        permission_helper.require_teacher(current_user_context)

        course = crud_course.get(db, id=assessment_in.course_id)
        if not course:
            raise NotFoundError("Course not found")
        permission_helper.require_course_owner(
            current_user_context, course, "You can only create assessments for your own courses"
        )

        assessment = crud_assessment.create_with_teacher(
            db, obj_in=assessment_in, teacher_id=current_user_context.user.id, commit=False
        )
        logger.info(
            f"Teacher {current_user_context.user.id} created assessment {assessment.id} "
            f"in course {course.id} ({len(assessment.questions)} questions, {assessment.total_points} points)"
        )

        if background_tasks is not None:
            notification_dispatcher.schedule_assessment_created(
                background_tasks,
                students=crud_enrollment.get_active_students(db, course_id=course.id),
                assessment=assessment,
                course=course,
                teacher=crud_user.get(db, id=current_user_context.user.id)
            )
        return assessment

    def get_course_assessments(self, db: Session, course_id: int, current_user_context: UserContext) -> List[AssessmentSchema]:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course not found")

        if permission_helper.is_teacher(current_user_context):
            assessments = crud_assessment.get_by_course(
                db, course_id=course_id, teacher_id=current_user_context.user.id, include_drafts=True
            )
            return [AssessmentSchema.model_validate(a) for a in assessments]

        # Listings never carry answer keys for students
        views = [AssessmentSchema.model_validate(a) for a in crud_assessment.get_by_course(db, course_id=course_id)]
        return [v.model_copy(update={"questions": [q.without_answer_key() for q in v.questions]}) for v in views]

    def get_assessment(self, db: Session, assessment_id: int, current_user_context: UserContext) -> AssessmentDetail:
        assessment = self._get_assessment_or_404(db, assessment_id)

        if permission_helper.is_teacher(current_user_context):
            permission_helper.require_assessment_owner(
                current_user_context, assessment, "Not authorized to view this assessment"
            )
            return AssessmentDetail(assessment=AssessmentSchema.model_validate(assessment))

        if assessment.status == AssessmentStatusEnum.DRAFT:
            raise NotFoundError("Assessment not found")

        student_id = current_user_context.user.id
        latest = assessment_submission_service.get_latest_submission(db, assessment.id, student_id)
        has_submitted = latest is not None

        return AssessmentDetail(
            assessment=self._student_view(assessment, student_id, has_submitted),
            submission=SubmissionSchema.model_validate(latest) if latest else None,
            has_submitted=has_submitted
        )

    def update_assessment(
        self, db: Session, assessment_id: int, assessment_in: AssessmentUpdate, current_user_context: UserContext
    ) -> Assessment:
        assessment = self._require_owned_assessment(db, assessment_id, current_user_context, "update")
        return crud_assessment.update_with_questions(db, db_obj=assessment, obj_in=assessment_in, commit=False)

    def delete_assessment(self, db: Session, assessment_id: int, current_user_context: UserContext) -> int:
        """Delete the assessment and every submission made against it; returns the submission count removed."""
        assessment = self._require_owned_assessment(db, assessment_id, current_user_context, "delete")
        deleted_submissions = len(assessment.submissions)
        db.delete(assessment)
        db.flush()
        logger.info(f"Assessment {assessment_id} deleted with {deleted_submissions} submissions")
        return deleted_submissions


assessment_service = AssessmentService()

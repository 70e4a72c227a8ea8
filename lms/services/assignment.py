import logging
from typing import List

from sqlalchemy.orm import Session

from lms.core.constants import AssignmentStatusEnum
from lms.core.exceptions import NotFoundError
from lms.crud.assignment import assignment as crud_assignment
from lms.crud.course import course as crud_course
from lms.crud.course_enrollment import course_enrollment as crud_enrollment
from lms.models.assignment import Assignment
from lms.schemas.assignment import AssignmentCreate, AssignmentDeleteResult, AssignmentUpdate
from lms.schemas.user import UserContext
from lms.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class AssignmentService:

    def _get_assignment_or_404(self, db: Session, assignment_id: int) -> Assignment:
        assignment = crud_assignment.get(db, id=assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def _require_owned_assignment(self, db: Session, assignment_id: int, current_user_context: UserContext, action: str) -> Assignment:
        permission_helper.require_teacher(current_user_context)
        assignment = self._get_assignment_or_404(db, assignment_id)
        permission_helper.require_assignment_owner(
            current_user_context, assignment, f"Not authorized to {action} this assignment"
        )
        return assignment

    def create_assignment(self, db: Session, assignment_in: AssignmentCreate, current_user_context: UserContext) -> Assignment:
        permission_helper.require_teacher(current_user_context)

        course = crud_course.get(db, id=assignment_in.course_id)
        if not course:
            raise NotFoundError("Course not found")
        permission_helper.require_course_owner(
            current_user_context, course, "You can only create assignments for your own courses"
        )

        assignment = crud_assignment.create_with_teacher(
            db, obj_in=assignment_in, teacher_id=current_user_context.user.id, commit=False
        )
        logger.info(
            f"Teacher {current_user_context.user.id} created assignment {assignment.id} in course {course.id}"
        )
        return assignment

    def get_course_assignments(self, db: Session, course_id: int, current_user_context: UserContext) -> List[Assignment]:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course not found")

        if permission_helper.is_teacher(current_user_context):
            return crud_assignment.get_by_course(
                db, course_id=course_id, teacher_id=current_user_context.user.id, include_drafts=True
            )
        return crud_assignment.get_by_course(db, course_id=course_id)

    def get_my_assignments(self, db: Session, current_user_context: UserContext) -> List[Assignment]:
        """A teacher's own assignments, or the visible assignments of a student's active courses."""
        if permission_helper.is_teacher(current_user_context):
            return crud_assignment.get_by_teacher(db, teacher_id=current_user_context.user.id)

        course_ids = crud_enrollment.get_active_course_ids(db, student_id=current_user_context.user.id)
        return crud_assignment.get_visible_for_courses(db, course_ids=course_ids)

    def get_assignment(self, db: Session, assignment_id: int, current_user_context: UserContext) -> Assignment:
        assignment = self._get_assignment_or_404(db, assignment_id)

        if permission_helper.is_teacher(current_user_context):
            permission_helper.require_assignment_owner(
                current_user_context, assignment, "Not authorized to view this assignment"
            )
            return assignment

        if assignment.status == AssignmentStatusEnum.DRAFT:
            raise NotFoundError("Assignment not found")
        return assignment

    def update_assignment(
        self, db: Session, assignment_id: int, assignment_in: AssignmentUpdate, current_user_context: UserContext
    ) -> Assignment:
        assignment = self._require_owned_assignment(db, assignment_id, current_user_context, "update")
        return crud_assignment.update_assignment(db, db_obj=assignment, obj_in=assignment_in, commit=False)

    def delete_assignment(self, db: Session, assignment_id: int, current_user_context: UserContext) -> AssignmentDeleteResult:
        assignment = self._require_owned_assignment(db, assignment_id, current_user_context, "delete")
        result = AssignmentDeleteResult(assignment_id=assignment.id, deleted_submissions=len(assignment.submissions))
        db.delete(assignment)
        db.flush()
        logger.info(f"Assignment {assignment_id} deleted with {result.deleted_submissions} submissions")
        return result


assignment_service = AssignmentService()

import logging
from typing import List

from sqlalchemy.orm import Session

from lms.core.exceptions import NotFoundError
from lms.crud.assignment import assignment as crud_assignment
from lms.crud.grade import grade as crud_grade
from lms.models.grade import Grade
from lms.schemas.grade import GradeUpdate
from lms.schemas.user import UserContext
from lms.services.assignment_submission import require_grade_in_range
from lms.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class GradeService:

    def get_my_grades(self, db: Session, current_user_context: UserContext) -> List[Grade]:
        permission_helper.require_student(current_user_context)
        return crud_grade.get_all_by_student(db, student_id=current_user_context.user.id)

    def get_assignment_grades(self, db: Session, assignment_id: int, current_user_context: UserContext) -> List[Grade]:
        permission_helper.require_teacher(current_user_context)
        assignment = crud_assignment.get(db, id=assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        permission_helper.require_assignment_owner(
            current_user_context, assignment, "Not authorized to view these grades"
        )
        return crud_grade.get_all_by_assignment(db, assignment_id=assignment.id)

    def update_grade(self, db: Session, grade_id: int, grade_in: GradeUpdate, current_user_context: UserContext) -> Grade:
        """
        Override a grade book entry. The score is taken as final, no late
        penalty is applied, and the linked submission is kept in step.
        """
        permission_helper.require_teacher(current_user_context)
        entry = crud_grade.get(db, id=grade_id)
        if not entry:
            raise NotFoundError("Grade not found")
        permission_helper.require_assignment_owner(
            current_user_context, entry.assignment, "Not authorized to update this grade"
        )

        update_data = grade_in.model_dump(exclude_unset=True)
        if update_data.get("score") is not None:
            require_grade_in_range(update_data["score"], entry.assignment.total_points)
        else:
            update_data.pop("score", None)

        entry = crud_grade.update(db, db_obj=entry, obj_in=update_data, commit=False)
        if entry.submission is not None:
            entry.submission.grade = entry.score
            entry.submission.feedback = entry.feedback
            db.flush()

        logger.info(f"Teacher {current_user_context.user.id} updated grade {entry.id} to {entry.score:g}")
        return entry


grade_service = GradeService()

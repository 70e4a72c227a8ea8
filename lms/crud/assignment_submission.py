from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from lms.crud.base import CRUDBase
from lms.models.assignment import Assignment
from lms.models.assignment_submission import AssignmentSubmission
from lms.schemas.assignment_submission import GradeAssignmentSubmission, SubmitAssignment

class CRUDAssignmentSubmission(CRUDBase[AssignmentSubmission, SubmitAssignment, GradeAssignmentSubmission]):

    def _query_with_relationships(self, db: Session):
        return db.query(AssignmentSubmission).options(
            selectinload(AssignmentSubmission.student),
            selectinload(AssignmentSubmission.assignment).selectinload(Assignment.course)
        )

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(AssignmentSubmission.id == id).first()

    def get_by_student_and_assignment(self, db: Session, student_id: int, assignment_id: int) -> Optional[AssignmentSubmission]:
        return (
            db.query(AssignmentSubmission)
            .filter(AssignmentSubmission.student_id == student_id)
            .filter(AssignmentSubmission.assignment_id == assignment_id)
            .first()
        )

    def get_all_by_assignment(self, db: Session, assignment_id: int) -> List[AssignmentSubmission]:
        return (
            self._query_with_relationships(db)
            .filter(AssignmentSubmission.assignment_id == assignment_id)
            .order_by(AssignmentSubmission.submitted_at.desc(), AssignmentSubmission.id.desc())
            .all()
        )

    def get_all_by_student(self, db: Session, student_id: int) -> List[AssignmentSubmission]:
        return (
            self._query_with_relationships(db)
            .filter(AssignmentSubmission.student_id == student_id)
            .order_by(AssignmentSubmission.submitted_at.desc(), AssignmentSubmission.id.desc())
            .all()
        )


assignment_submission = CRUDAssignmentSubmission(AssignmentSubmission)

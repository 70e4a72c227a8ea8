from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from lms.crud.base import CRUDBase
from lms.models.assignment import Assignment
from lms.models.grade import Grade
from lms.schemas.grade import GradeUpdate

class CRUDGrade(CRUDBase[Grade, GradeUpdate, GradeUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Grade).options(
            selectinload(Grade.student),
            selectinload(Grade.assignment).selectinload(Assignment.course)
        )

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(Grade.id == id).first()

    def get_by_student_and_assignment(self, db: Session, student_id: int, assignment_id: int) -> Optional[Grade]:
        return (
            db.query(Grade)
            .filter(Grade.student_id == student_id)
            .filter(Grade.assignment_id == assignment_id)
            .first()
        )

    def get_all_by_student(self, db: Session, student_id: int) -> List[Grade]:
        return (
            self._query_with_relationships(db)
            .filter(Grade.student_id == student_id)
            .order_by(Grade.created_at.desc(), Grade.id.desc())
            .all()
        )

    def get_all_by_assignment(self, db: Session, assignment_id: int) -> List[Grade]:
        return (
            self._query_with_relationships(db)
            .filter(Grade.assignment_id == assignment_id)
            .order_by(Grade.id.asc())
            .all()
        )


grade = CRUDGrade(Grade)

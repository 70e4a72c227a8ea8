from sqlalchemy.orm import Session, selectinload
from typing import List

from lms.crud.base import CRUDBase
from lms.models.course import Course
from lms.schemas.course import CourseCreate, CourseUpdate


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Course).options(
            selectinload(Course.teacher),
            selectinload(Course.enrollments)
        )

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(Course.id == id).first()

    def get_multi(self, db: Session, skip: int = 0, limit: int = 100) -> List[Course]:
        return (
            self._query_with_relationships(db)
            .order_by(Course.created_at.desc(), Course.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_teacher_courses(self, db: Session, teacher_id: int) -> List[Course]:
        return (
            self._query_with_relationships(db)
            .filter(Course.teacher_id == teacher_id)
            .order_by(Course.created_at.desc(), Course.id.desc())
            .all()
        )

course = CRUDCourse(Course)

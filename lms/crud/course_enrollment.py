from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from lms.core.constants import EnrollmentStatusEnum
from lms.crud.base import CRUDBase
from lms.models.course import Course
from lms.models.course_enrollment import CourseEnrollment
from lms.models.user import User
from lms.schemas.course_enrollment import CourseEnrollmentCreate, CourseEnrollmentUpdate

class CRUDCourseEnrollment(CRUDBase[CourseEnrollment, CourseEnrollmentCreate, CourseEnrollmentUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(CourseEnrollment).options(
            selectinload(CourseEnrollment.student),
            selectinload(CourseEnrollment.course).selectinload(Course.teacher)
        )

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(CourseEnrollment.id == id).first()

    def get_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> Optional[CourseEnrollment]:
        return (
            self._query_with_relationships(db)
            .filter(CourseEnrollment.student_id == student_id)
            .filter(CourseEnrollment.course_id == course_id)
            .first()
        )

    def get_active_by_student_and_course(self, db: Session, student_id: int, course_id: int) -> Optional[CourseEnrollment]:
        return (
            db.query(CourseEnrollment)
            .filter(CourseEnrollment.student_id == student_id)
            .filter(CourseEnrollment.course_id == course_id)
            .filter(CourseEnrollment.status == EnrollmentStatusEnum.ACTIVE)
            .first()
        )

    def get_by_student(self, db: Session, student_id: int) -> List[CourseEnrollment]:
        return (
            self._query_with_relationships(db)
            .filter(CourseEnrollment.student_id == student_id)
            .order_by(CourseEnrollment.enrolled_at.desc(), CourseEnrollment.id.desc())
            .all()
        )

    def get_by_course(self, db: Session, course_id: int) -> List[CourseEnrollment]:
        return (
            self._query_with_relationships(db)
            .filter(CourseEnrollment.course_id == course_id)
            .order_by(CourseEnrollment.enrolled_at.desc(), CourseEnrollment.id.desc())
            .all()
        )

    def get_active_course_ids(self, db: Session, student_id: int) -> List[int]:
        rows = (
            db.query(CourseEnrollment.course_id)
            .filter(CourseEnrollment.student_id == student_id)
            .filter(CourseEnrollment.status == EnrollmentStatusEnum.ACTIVE)
            .all()
        )
        return [row.course_id for row in rows]

    def get_active_students(self, db: Session, course_id: int) -> List[User]:
        return (
            db.query(User)
            .join(CourseEnrollment, CourseEnrollment.student_id == User.id)
            .filter(CourseEnrollment.course_id == course_id)
            .filter(CourseEnrollment.status == EnrollmentStatusEnum.ACTIVE)
            .all()
        )


course_enrollment = CRUDCourseEnrollment(CourseEnrollment)

import logging
from typing import List
from sqlalchemy.orm import Session

from lms.core.exceptions import NotFoundError
from lms.crud.course import course as crud_course
from lms.models.course import Course
from lms.schemas.course import CourseCreate, CourseDeleteResult, CourseUpdate
from lms.schemas.user import UserContext
from lms.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class CourseService:

    def _get_course_or_404(self, db: Session, course_id: int) -> Course:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def _require_owned_course(self, db: Session, course_id: int, current_user_context: UserContext, action: str) -> Course:
        permission_helper.require_teacher(current_user_context)
        course = self._get_course_or_404(db, course_id)
        permission_helper.require_course_owner(current_user_context, course, f"Not authorized to {action} this course")
        return course

    def create_course(self, db: Session, course_in: CourseCreate, current_user_context: UserContext) -> Course:
        permission_helper.require_teacher(current_user_context)
        course_data = course_in.model_dump()
        course_data["teacher_id"] = current_user_context.user.id
        new_course = crud_course.create(db, obj_in=course_data, commit=False)
        logger.info(f"Teacher {current_user_context.user.id} created course {new_course.id}")
        return new_course

    def get_courses(self, db: Session, skip: int = 0, limit: int = 100) -> List[Course]:
        return crud_course.get_multi(db, skip=skip, limit=limit)

    def get_my_courses(self, db: Session, current_user_context: UserContext) -> List[Course]:
        permission_helper.require_teacher(current_user_context)
        return crud_course.get_teacher_courses(db, teacher_id=current_user_context.user.id)

    def get_course(self, db: Session, course_id: int) -> Course:
        return self._get_course_or_404(db, course_id)

    def update_course(self, db: Session, course_id: int, course_in: CourseUpdate, current_user_context: UserContext) -> Course:
        course = self._require_owned_course(db, course_id, current_user_context, "update")
        return crud_course.update(db, db_obj=course, obj_in=course_in, commit=False)

    def delete_course(self, db: Session, course_id: int, current_user_context: UserContext) -> CourseDeleteResult:
        course = self._require_owned_course(db, course_id, current_user_context, "delete")
        result = CourseDeleteResult(
            course_id=course.id,
            deleted_enrollments=len(course.enrollments),
            deleted_assessments=len(course.assessments),
            deleted_assignments=len(course.assignments)
        )
        db.delete(course)
        db.flush()
        logger.info(
            f"Course {course_id} deleted with {result.deleted_enrollments} enrollments, "
            f"{result.deleted_assessments} assessments and {result.deleted_assignments} assignments"
        )
        return result


course_service = CourseService()

import logging
from typing import List
from sqlalchemy.orm import Session

from lms.core.constants import EnrollmentStatusEnum
from lms.core.exceptions import ForbiddenError, NotFoundError, ValidationFailure
from lms.crud.course import course as crud_course
from lms.crud.course_enrollment import course_enrollment as crud_enrollment
from lms.models.course_enrollment import CourseEnrollment
from lms.schemas.course_enrollment import CourseEnrollmentCreate, CourseEnrollmentRequest, EnrollmentCheck
from lms.schemas.user import UserContext
from lms.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class EnrollmentService:

    def _get_enrollment_or_404(self, db: Session, enrollment_id: int) -> CourseEnrollment:
        enrollment = crud_enrollment.get(db, id=enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment not found")
        return enrollment

    def enroll(self, db: Session, enrollment_in: CourseEnrollmentRequest, current_user_context: UserContext) -> CourseEnrollment:
        permission_helper.require_student(current_user_context)
        student_id = current_user_context.user.id

        course = crud_course.get(db, id=enrollment_in.course_id)
        if not course:
            raise NotFoundError("Course not found")

        existing = crud_enrollment.get_by_student_and_course(db, student_id=student_id, course_id=course.id)
        if existing:
            if existing.is_active:
                raise ValidationFailure("You are already enrolled in this course")
            # Re-enrolling after dropping reuses the row
            return crud_enrollment.update(
                db, db_obj=existing, obj_in={"status": EnrollmentStatusEnum.ACTIVE}, commit=False
            )

        enrollment = crud_enrollment.create(
            db,
            obj_in=CourseEnrollmentCreate(course_id=course.id, student_id=student_id),
            commit=False
        )
        logger.info(f"Student {student_id} enrolled in course {course.id}")
        return enrollment

    def get_my_enrollments(self, db: Session, current_user_context: UserContext) -> List[CourseEnrollment]:
        permission_helper.require_student(current_user_context)
        return crud_enrollment.get_by_student(db, student_id=current_user_context.user.id)

    def check_enrollment(self, db: Session, course_id: int, current_user_context: UserContext) -> EnrollmentCheck:
        enrollment = crud_enrollment.get_active_by_student_and_course(
            db, student_id=current_user_context.user.id, course_id=course_id
        )
        return EnrollmentCheck(course_id=course_id, enrolled=enrollment is not None)

    def unenroll(self, db: Session, enrollment_id: int, current_user_context: UserContext) -> CourseEnrollment:
        permission_helper.require_student(current_user_context)
        enrollment = self._get_enrollment_or_404(db, enrollment_id)
        if enrollment.student_id != current_user_context.user.id:
            raise ForbiddenError("You can only unenroll yourself")
        crud_enrollment.remove(db, id=enrollment.id, commit=False)
        logger.info(f"Student {enrollment.student_id} unenrolled from course {enrollment.course_id}")
        return enrollment

    def get_course_enrollments(self, db: Session, course_id: int, current_user_context: UserContext) -> List[CourseEnrollment]:
        permission_helper.require_teacher(current_user_context)
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course not found")
        permission_helper.require_course_owner(
            current_user_context, course, "Not authorized to view enrollments for this course"
        )
        return crud_enrollment.get_by_course(db, course_id=course.id)

    def remove_student(self, db: Session, enrollment_id: int, current_user_context: UserContext) -> CourseEnrollment:
        permission_helper.require_teacher(current_user_context)
        enrollment = self._get_enrollment_or_404(db, enrollment_id)
        permission_helper.require_course_owner(
            current_user_context, enrollment.course, "Not authorized to remove students from this course"
        )
        crud_enrollment.remove(db, id=enrollment.id, commit=False)
        logger.info(f"Teacher {current_user_context.user.id} removed student {enrollment.student_id} from course {enrollment.course_id}")
        return enrollment


enrollment_service = EnrollmentService()

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.schemas.response import APIResponse
from lms.utils import deps
from lms.schemas.course_enrollment import CourseEnrollment, CourseEnrollmentRequest, EnrollmentCheck
from lms.schemas.user import UserContext
from lms.services.enrollment import enrollment_service

router = APIRouter()

@router.post("/", response_model=APIResponse[CourseEnrollment], status_code=status.HTTP_201_CREATED)
async def enroll_in_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_in: CourseEnrollmentRequest,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    enrollment = enrollment_service.enroll(db, enrollment_in=enrollment_in, current_user_context=context)
    return APIResponse(message="Enrolled successfully", data=CourseEnrollment.model_validate(enrollment))


@router.get("/me", response_model=APIResponse[List[CourseEnrollment]])
async def get_my_enrollments(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    enrollments = enrollment_service.get_my_enrollments(db, current_user_context=context)
    return APIResponse(
        message="Enrollments retrieved successfully",
        data=[CourseEnrollment.model_validate(e) for e in enrollments]
    )


@router.get("/check/{course_id}", response_model=APIResponse[EnrollmentCheck])
async def check_enrollment(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    check = enrollment_service.check_enrollment(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Enrollment status retrieved", data=check)


@router.get("/course/{course_id}", response_model=APIResponse[List[CourseEnrollment]])
async def get_course_enrollments(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    enrollments = enrollment_service.get_course_enrollments(db, course_id=course_id, current_user_context=context)
    return APIResponse(
        message="Course enrollments retrieved successfully",
        data=[CourseEnrollment.model_validate(e) for e in enrollments]
    )


@router.delete("/{enrollment_id}", response_model=APIResponse)
async def unenroll(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    enrollment_service.unenroll(db, enrollment_id=enrollment_id, current_user_context=context)
    return APIResponse(message="Unenrolled successfully")


@router.delete("/{enrollment_id}/remove", response_model=APIResponse)
async def remove_student_from_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    enrollment_service.remove_student(db, enrollment_id=enrollment_id, current_user_context=context)
    return APIResponse(message="Student removed from course successfully")

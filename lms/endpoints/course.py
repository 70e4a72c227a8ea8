from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.schemas.response import APIResponse
from lms.utils import deps
from lms.schemas.course import Course, CourseCreate, CourseDeleteResult, CourseUpdate
from lms.schemas.user import UserContext
from lms.services.course import course_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
async def create_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_in: CourseCreate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    new_course = course_service.create_course(db, course_in=course_in, current_user_context=context)
    return APIResponse(message="Course created successfully", data=Course.model_validate(new_course))


@router.get("/", response_model=APIResponse[List[Course]])
async def get_courses(
    db: Session = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100
):
    courses = course_service.get_courses(db, skip=skip, limit=limit)
    return APIResponse(message="Courses retrieved successfully", data=[Course.model_validate(c) for c in courses])


@router.get("/me", response_model=APIResponse[List[Course]])
async def get_my_courses(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    courses = course_service.get_my_courses(db, current_user_context=context)
    return APIResponse(message="Your courses retrieved successfully", data=[Course.model_validate(c) for c in courses])


@router.get("/{course_id}", response_model=APIResponse[Course])
async def get_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int
):
    course = course_service.get_course(db, course_id=course_id)
    return APIResponse(message="Course retrieved successfully", data=Course.model_validate(course))


@router.put("/{course_id}", response_model=APIResponse[Course])
async def update_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    course_in: CourseUpdate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    updated_course = course_service.update_course(db, course_id=course_id, course_in=course_in, current_user_context=context)
    return APIResponse(message="Course updated successfully", data=Course.model_validate(updated_course))


@router.delete("/{course_id}", response_model=APIResponse[CourseDeleteResult])
async def delete_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    result = course_service.delete_course(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Course deleted successfully", data=result)

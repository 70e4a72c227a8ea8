from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lms.schemas.response import APIResponse
from lms.utils import deps
from lms.schemas.grade import Grade, GradeList, GradeUpdate
from lms.schemas.user import UserContext
from lms.services.grade import grade_service

router = APIRouter()

@router.get("/me", response_model=APIResponse[GradeList])
async def get_my_grades(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    grades = grade_service.get_my_grades(db, current_user_context=context)
    return APIResponse(
        message="Grades retrieved successfully",
        data=GradeList(grades=[Grade.model_validate(g) for g in grades], count=len(grades))
    )


@router.get("/assignment/{assignment_id}", response_model=APIResponse[GradeList])
async def get_assignment_grades(
    *,
    db: Session = Depends(deps.get_db),
    assignment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    grades = grade_service.get_assignment_grades(db, assignment_id=assignment_id, current_user_context=context)
    return APIResponse(
        message="Grades retrieved successfully",
        data=GradeList(grades=[Grade.model_validate(g) for g in grades], count=len(grades))
    )


@router.put("/{grade_id}", response_model=APIResponse[Grade])
async def update_grade(
    *,
    db: Session = Depends(deps.get_transactional_db),
    grade_id: int,
    grade_in: GradeUpdate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    updated = grade_service.update_grade(db, grade_id=grade_id, grade_in=grade_in, current_user_context=context)
    return APIResponse(message="Grade updated successfully", data=Grade.model_validate(updated))

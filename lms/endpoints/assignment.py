from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.schemas.response import APIResponse
from lms.utils import deps
from lms.schemas.assignment import Assignment, AssignmentCreate, AssignmentDeleteResult, AssignmentUpdate
from lms.schemas.assignment_submission import AssignmentSubmission, AssignmentSubmissionList
from lms.schemas.user import UserContext
from lms.services.assignment import assignment_service
from lms.services.assignment_submission import assignment_submission_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Assignment], status_code=status.HTTP_201_CREATED)
async def create_assignment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assignment_in: AssignmentCreate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    new_assignment = assignment_service.create_assignment(db, assignment_in=assignment_in, current_user_context=context)
    return APIResponse(message="Assignment created successfully", data=Assignment.model_validate(new_assignment))


@router.get("/me", response_model=APIResponse[List[Assignment]])
async def get_my_assignments(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    assignments = assignment_service.get_my_assignments(db, current_user_context=context)
    return APIResponse(
        message="Assignments retrieved successfully",
        data=[Assignment.model_validate(a) for a in assignments]
    )


@router.get("/course/{course_id}", response_model=APIResponse[List[Assignment]])
async def get_course_assignments(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    assignments = assignment_service.get_course_assignments(db, course_id=course_id, current_user_context=context)
    return APIResponse(
        message="Assignments retrieved successfully",
        data=[Assignment.model_validate(a) for a in assignments]
    )


@router.get("/{assignment_id}", response_model=APIResponse[Assignment])
async def get_assignment(
    *,
    db: Session = Depends(deps.get_db),
    assignment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    assignment = assignment_service.get_assignment(db, assignment_id=assignment_id, current_user_context=context)
    return APIResponse(message="Assignment retrieved successfully", data=Assignment.model_validate(assignment))


@router.put("/{assignment_id}", response_model=APIResponse[Assignment])
async def update_assignment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assignment_id: int,
    assignment_in: AssignmentUpdate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    updated = assignment_service.update_assignment(
        db, assignment_id=assignment_id, assignment_in=assignment_in, current_user_context=context
    )
    return APIResponse(message="Assignment updated successfully", data=Assignment.model_validate(updated))


@router.delete("/{assignment_id}", response_model=APIResponse[AssignmentDeleteResult])
async def delete_assignment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assignment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    result = assignment_service.delete_assignment(db, assignment_id=assignment_id, current_user_context=context)
    return APIResponse(message="Assignment deleted successfully", data=result)


@router.get("/{assignment_id}/submissions", response_model=APIResponse[AssignmentSubmissionList])
async def get_assignment_submissions(
    *,
    db: Session = Depends(deps.get_db),
    assignment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submissions = assignment_submission_service.get_assignment_submissions(
        db, assignment_id=assignment_id, current_user_context=context
    )
    return APIResponse(
        message="Submissions retrieved successfully",
        data=AssignmentSubmissionList(
            submissions=[AssignmentSubmission.model_validate(s) for s in submissions],
            count=len(submissions)
        )
    )

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from lms.schemas.response import APIResponse
from lms.utils import deps
from lms.schemas.assignment_submission import (
    AssignmentSubmission,
    GradeAssignmentSubmission,
    StudentAssignmentSubmission,
    StudentAssignmentSubmissionList,
    SubmitAssignment,
)
from lms.schemas.user import UserContext
from lms.services.assignment_submission import assignment_submission_service

router = APIRouter()

@router.post("/", response_model=APIResponse[AssignmentSubmission], status_code=status.HTTP_201_CREATED)
async def submit_assignment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    submission_in: SubmitAssignment,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submission, message = assignment_submission_service.submit_assignment(
        db, submission_in=submission_in, current_user_context=context
    )
    return APIResponse(message=message, data=AssignmentSubmission.model_validate(submission))


@router.get("/my-submissions", response_model=APIResponse[StudentAssignmentSubmissionList])
async def get_my_submissions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submissions = assignment_submission_service.get_my_submissions(db, current_user_context=context)
    return APIResponse(
        message="Submissions retrieved successfully",
        data=StudentAssignmentSubmissionList(
            submissions=[StudentAssignmentSubmission.model_validate(s) for s in submissions],
            count=len(submissions)
        )
    )


@router.get("/{submission_id}", response_model=APIResponse[StudentAssignmentSubmission])
async def get_submission(
    *,
    db: Session = Depends(deps.get_db),
    submission_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submission = assignment_submission_service.get_submission(
        db, submission_id=submission_id, current_user_context=context
    )
    return APIResponse(message="Submission retrieved successfully", data=StudentAssignmentSubmission.model_validate(submission))


@router.put("/{submission_id}/grade", response_model=APIResponse[AssignmentSubmission])
async def grade_submission(
    *,
    db: Session = Depends(deps.get_transactional_db),
    submission_id: int,
    grade_in: GradeAssignmentSubmission,
    background_tasks: BackgroundTasks,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submission = assignment_submission_service.grade_submission(
        db,
        submission_id=submission_id,
        grade_in=grade_in,
        current_user_context=context,
        background_tasks=background_tasks
    )
    return APIResponse(message="Submission graded successfully", data=AssignmentSubmission.model_validate(submission))


@router.delete("/{submission_id}", response_model=APIResponse)
async def delete_submission(
    *,
    db: Session = Depends(deps.get_transactional_db),
    submission_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    deleted_id = assignment_submission_service.delete_submission(
        db, submission_id=submission_id, current_user_context=context
    )
    return APIResponse(message="Submission deleted successfully", data={"submission_id": deleted_id})

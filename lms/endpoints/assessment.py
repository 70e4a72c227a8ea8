from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from lms.schemas.response import APIResponse
from lms.utils import deps
from lms.schemas.analytics import AssessmentAnalytics
from lms.schemas.assessment import Assessment, AssessmentCreate, AssessmentUpdate
from lms.schemas.assessment_submission import (
    AssessmentDetail,
    AssessmentSubmission,
    GradeSubmission,
    StudentSubmission,
    StudentSubmissionList,
    SubmissionList,
    SubmitAssessment,
)
from lms.schemas.user import UserContext
from lms.services.assessment import assessment_service
from lms.services.assessment_submission import assessment_submission_service

router = APIRouter()

@router.post("/", response_model=APIResponse[Assessment], status_code=status.HTTP_201_CREATED)
async def create_assessment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assessment_in: AssessmentCreate,
    background_tasks: BackgroundTasks,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    new_assessment = assessment_service.create_assessment(
        db, assessment_in=assessment_in, current_user_context=context, background_tasks=background_tasks
    )
    return APIResponse(message="Assessment created successfully", data=Assessment.model_validate(new_assessment))


@router.get("/course/{course_id}", response_model=APIResponse[List[Assessment]])
async def get_course_assessments(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    assessments = assessment_service.get_course_assessments(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Assessments retrieved successfully", data=assessments)


@router.get("/my-submissions", response_model=APIResponse[StudentSubmissionList])
async def get_my_submissions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submissions = assessment_submission_service.get_my_submissions(db, current_user_context=context)
    return APIResponse(
        message="Submissions retrieved successfully",
        data=StudentSubmissionList(
            submissions=[StudentSubmission.model_validate(s) for s in submissions],
            count=len(submissions)
        )
    )


@router.put("/submissions/{submission_id}/grade", response_model=APIResponse[AssessmentSubmission])
async def grade_submission(
    *,
    db: Session = Depends(deps.get_transactional_db),
    submission_id: int,
    grade_in: GradeSubmission,
    background_tasks: BackgroundTasks,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submission = assessment_submission_service.grade_submission(
        db,
        submission_id=submission_id,
        grade_in=grade_in,
        current_user_context=context,
        background_tasks=background_tasks
    )
    return APIResponse(message="Submission graded successfully", data=AssessmentSubmission.model_validate(submission))


@router.get("/{assessment_id}", response_model=APIResponse[AssessmentDetail])
async def get_assessment(
    *,
    db: Session = Depends(deps.get_db),
    assessment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    detail = assessment_service.get_assessment(db, assessment_id=assessment_id, current_user_context=context)
    return APIResponse(message="Assessment retrieved successfully", data=detail)


@router.put("/{assessment_id}", response_model=APIResponse[Assessment])
async def update_assessment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assessment_id: int,
    assessment_in: AssessmentUpdate,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    updated = assessment_service.update_assessment(
        db, assessment_id=assessment_id, assessment_in=assessment_in, current_user_context=context
    )
    return APIResponse(message="Assessment updated successfully", data=Assessment.model_validate(updated))


@router.delete("/{assessment_id}", response_model=APIResponse)
async def delete_assessment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assessment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    deleted_submissions = assessment_service.delete_assessment(db, assessment_id=assessment_id, current_user_context=context)
    return APIResponse(
        message="Assessment deleted successfully",
        data={"assessment_id": assessment_id, "deleted_submissions": deleted_submissions}
    )


@router.post("/{assessment_id}/submit", response_model=APIResponse[AssessmentSubmission], status_code=status.HTTP_201_CREATED)
async def submit_assessment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    assessment_id: int,
    submission_in: SubmitAssessment,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submission, message = assessment_submission_service.submit_assessment(
        db, assessment_id=assessment_id, submission_in=submission_in, current_user_context=context
    )
    return APIResponse(message=message, data=AssessmentSubmission.model_validate(submission))


@router.get("/{assessment_id}/submissions", response_model=APIResponse[SubmissionList])
async def get_assessment_submissions(
    *,
    db: Session = Depends(deps.get_db),
    assessment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    submissions = assessment_submission_service.get_assessment_submissions(
        db, assessment_id=assessment_id, current_user_context=context
    )
    return APIResponse(
        message="Submissions retrieved successfully",
        data=SubmissionList(
            submissions=[AssessmentSubmission.model_validate(s) for s in submissions],
            count=len(submissions)
        )
    )


@router.get("/{assessment_id}/analytics", response_model=APIResponse[AssessmentAnalytics])
async def get_assessment_analytics(
    *,
    db: Session = Depends(deps.get_db),
    assessment_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    analytics = assessment_submission_service.get_assessment_analytics(
        db, assessment_id=assessment_id, current_user_context=context
    )
    return APIResponse(message="Analytics retrieved successfully", data=analytics)

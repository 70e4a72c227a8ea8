from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from typing import Optional, List, Union
from datetime import datetime

from lms.core.constants import SubmissionStatusEnum
from lms.schemas.assessment import Assessment, AssessmentSummary
from lms.schemas.user import UserSummary

# Raw answer value; which member is meaningful is decided by the question type
AnswerValue = Union[StrictStr, StrictInt, StrictFloat, List[StrictStr]]

class AnswerSubmit(BaseModel):
    question_id: int
    answer: Optional[AnswerValue] = None

class GradedAnswer(BaseModel):
    """An answer after grading; also the shape a teacher sends when grading manually."""
    question_id: int
    answer: Optional[AnswerValue] = None
    is_correct: Optional[bool] = None
    points_awarded: float = Field(default=0, ge=0)
    feedback: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class SubmitAssessment(BaseModel):
    answers: List[AnswerSubmit]
    started_at: Optional[datetime] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "started_at": "2030-01-10T09:00:00Z",
                "answers": [
                    {"question_id": 1, "answer": "4"},
                    {"question_id": 2, "answer": " paris "},
                    {"question_id": 3, "answer": "A function that calls itself..."}
                ]
            }
        }
    )

class GradeSubmission(BaseModel):
    answers: Optional[List[GradedAnswer]] = None
    teacher_comments: Optional[str] = None

class AssessmentSubmission(BaseModel):
    id: int
    assessment_id: int
    student_id: int
    answers: List[GradedAnswer] = []
    score: float
    percentage: int
    passed: bool
    attempt_number: int
    started_at: datetime
    submitted_at: Optional[datetime] = None
    time_spent: int
    status: SubmissionStatusEnum
    graded_by_id: Optional[int] = None
    graded_at: Optional[datetime] = None
    teacher_comments: Optional[str] = None
    student: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)

class StudentSubmission(AssessmentSubmission):
    assessment: Optional[AssessmentSummary] = None

class SubmissionList(BaseModel):
    submissions: List[AssessmentSubmission]
    count: int

class StudentSubmissionList(BaseModel):
    submissions: List[StudentSubmission]
    count: int

class AssessmentDetail(BaseModel):
    """An assessment as seen by the caller, with the student's own latest attempt."""
    assessment: Assessment
    submission: Optional[AssessmentSubmission] = None
    has_submitted: Optional[bool] = None

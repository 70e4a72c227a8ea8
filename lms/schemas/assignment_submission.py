from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from lms.core.constants import AssignmentSubmissionStatusEnum
from lms.schemas.assignment import AssignmentSummary, FileLink
from lms.schemas.user import UserSummary

class SubmitAssignment(BaseModel):
    assignment_id: int
    text_submission: Optional[str] = None
    files: List[FileLink] = []

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "assignment_id": 1,
                "text_submission": "The engine separates the store from the mill...",
                "files": [{"name": "essay.pdf", "url": "https://files.example.com/essay.pdf"}]
            }
        }
    )

class GradeAssignmentSubmission(BaseModel):
    grade: float
    feedback: Optional[str] = None

class AssignmentSubmission(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    text_submission: Optional[str] = None
    files: List[FileLink] = []
    submitted_at: datetime
    is_late: bool
    grade: Optional[float] = None
    late_penalty: float = Field(default=0)
    feedback: Optional[str] = None
    status: AssignmentSubmissionStatusEnum
    graded_by_id: Optional[int] = None
    graded_at: Optional[datetime] = None
    student: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)

class StudentAssignmentSubmission(AssignmentSubmission):
    assignment: Optional[AssignmentSummary] = None

class AssignmentSubmissionList(BaseModel):
    submissions: List[AssignmentSubmission]
    count: int

class StudentAssignmentSubmissionList(BaseModel):
    submissions: List[StudentAssignmentSubmission]
    count: int

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator
from typing import Optional, List
from datetime import datetime

from lms.core.constants import AssignmentStatusEnum, SubmissionTypeEnum
from lms.schemas.assessment import CourseSummary
from lms.schemas.user import UserSummary

class FileLink(BaseModel):
    """A file held in external storage, referenced by URL."""
    name: str
    url: HttpUrl

    model_config = ConfigDict(from_attributes=True)

def dump_file_links(links: Optional[List[FileLink]]) -> List[dict]:
    # JSON columns need plain strings, not pydantic Url objects
    return [link.model_dump(mode="json") for link in links or []]

class AssignmentBase(BaseModel):
    title: str
    description: str
    instructions: Optional[str] = None
    due_date: datetime
    total_points: float = Field(default=100, gt=0)
    allow_late_submission: bool = False
    late_submission_penalty: float = Field(default=10, ge=0, le=100)
    attachments: List[FileLink] = []
    status: AssignmentStatusEnum = AssignmentStatusEnum.DRAFT
    submission_type: SubmissionTypeEnum = SubmissionTypeEnum.BOTH

    @field_validator("title", "description")
    @classmethod
    def not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Field cannot be empty")
        return v

class AssignmentCreate(AssignmentBase):
    course_id: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Essay: The Analytical Engine",
                "description": "Write 800 words on Babbage's design.",
                "course_id": 1,
                "due_date": "2030-02-14T23:59:00Z",
                "total_points": 50,
                "allow_late_submission": True,
                "late_submission_penalty": 10,
                "status": "published",
                "submission_type": "both",
                "attachments": [{"name": "rubric.pdf", "url": "https://files.example.com/rubric.pdf"}]
            }
        }
    )

class AssignmentUpdate(AssignmentBase):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    total_points: Optional[float] = Field(default=None, gt=0)
    allow_late_submission: Optional[bool] = None
    late_submission_penalty: Optional[float] = Field(default=None, ge=0, le=100)
    attachments: Optional[List[FileLink]] = None
    status: Optional[AssignmentStatusEnum] = None
    submission_type: Optional[SubmissionTypeEnum] = None

class Assignment(AssignmentBase):
    id: int
    course_id: int
    teacher_id: int
    teacher: Optional[UserSummary] = None
    course: Optional[CourseSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class AssignmentSummary(BaseModel):
    id: int
    title: str
    due_date: datetime
    total_points: float
    course: Optional[CourseSummary] = None

    model_config = ConfigDict(from_attributes=True)

class AssignmentDeleteResult(BaseModel):
    assignment_id: int
    deleted_submissions: int

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from lms.schemas.assignment import AssignmentSummary
from lms.schemas.user import UserSummary

class GradeUpdate(BaseModel):
    score: Optional[float] = Field(default=None, ge=0)
    feedback: Optional[str] = None

class Grade(BaseModel):
    id: int
    student_id: int
    assignment_id: int
    submission_id: Optional[int] = None
    score: float
    feedback: Optional[str] = None
    student: Optional[UserSummary] = None
    assignment: Optional[AssignmentSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class GradeList(BaseModel):
    grades: List[Grade]
    count: int

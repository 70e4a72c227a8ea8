from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Any
from datetime import datetime

from lms.schemas.user import UserSummary

class CourseBase(BaseModel):
    title: str
    description: Optional[str] = None
    duration: Optional[str] = None

    @field_validator("title")
    @classmethod
    def not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty")
        return v

class CourseCreate(CourseBase):
    pass

class CourseUpdate(CourseBase):
    title: Optional[str] = None

class Course(CourseBase):
    id: int
    teacher_id: int
    teacher: Optional[UserSummary] = None
    total_enrolled_students: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CourseDeleteResult(BaseModel):
    course_id: int
    deleted_enrollments: int
    deleted_assessments: int
    deleted_assignments: int = 0

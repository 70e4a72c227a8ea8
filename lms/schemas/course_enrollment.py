from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from lms.core.constants import EnrollmentStatusEnum
from lms.schemas.user import UserSummary


class CourseEnrollmentBase(BaseModel):
    course_id: int


class CourseEnrollmentRequest(CourseEnrollmentBase):
    pass


class CourseEnrollmentCreate(CourseEnrollmentBase):
    student_id: int
    status: EnrollmentStatusEnum = EnrollmentStatusEnum.ACTIVE


class CourseEnrollmentUpdate(BaseModel):
    status: Optional[EnrollmentStatusEnum] = None


class EnrolledCourse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    teacher: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class CourseEnrollment(CourseEnrollmentBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    status: EnrollmentStatusEnum
    enrolled_at: datetime
    student: Optional[UserSummary] = None
    course: Optional[EnrolledCourse] = None


class EnrollmentCheck(BaseModel):
    course_id: int
    enrolled: bool

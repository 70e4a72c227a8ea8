from sqlalchemy import Boolean, Column, String, Integer, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from lms.core.database import Base
from lms.core.constants import RoleEnum

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(Enum(RoleEnum), nullable=False, default=RoleEnum.STUDENT)
    is_active = Column(Boolean(), default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    teaching_courses = relationship("Course", back_populates="teacher")
    course_enrollments = relationship("CourseEnrollment", back_populates="student")
    assessment_submissions = relationship(
        "AssessmentSubmission",
        back_populates="student",
        foreign_keys="AssessmentSubmission.student_id"
    )

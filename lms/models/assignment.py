from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Float, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from lms.core.database import Base
from lms.core.constants import AssignmentStatusEnum, SubmissionTypeEnum

class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False)
    instructions = Column(String, nullable=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    due_date = Column(DateTime(timezone=True), nullable=False)
    total_points = Column(Float, nullable=False, default=100)
    allow_late_submission = Column(Boolean, nullable=False, default=False)
    late_submission_penalty = Column(Float, nullable=False, default=10)  # percent per day late
    # [{"name": ..., "url": ...}]; files live in external storage
    attachments = Column(JSON, nullable=False, default=list)
    status = Column(Enum(AssignmentStatusEnum), nullable=False, default=AssignmentStatusEnum.DRAFT)
    submission_type = Column(Enum(SubmissionTypeEnum), nullable=False, default=SubmissionTypeEnum.BOTH)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course", back_populates="assignments")
    teacher = relationship("User")
    submissions = relationship("AssignmentSubmission", back_populates="assignment", cascade="all, delete-orphan")
    grades = relationship("Grade", back_populates="assignment", cascade="all, delete-orphan")

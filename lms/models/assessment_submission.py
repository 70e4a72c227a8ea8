from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, Boolean, Enum, JSON, UniqueConstraint
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from lms.core.database import Base
from lms.core.constants import SubmissionStatusEnum

class AssessmentSubmission(Base):
    __tablename__ = "assessment_submissions"
    # Closes the count-then-insert race on attempt numbering
    __table_args__ = (
        UniqueConstraint(
            "student_id", "assessment_id", "attempt_number",
            name="uq_assessment_submissions_student_attempt"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    score = Column(Float, nullable=False, default=0)
    percentage = Column(Integer, nullable=False, default=0)
    passed = Column(Boolean, nullable=False, default=False)
    attempt_number = Column(Integer, nullable=False, default=1)
    started_at = Column(DateTime(timezone=True), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    time_spent = Column(Integer, nullable=False, default=0)  # minutes
    status = Column(Enum(SubmissionStatusEnum), nullable=False, default=SubmissionStatusEnum.IN_PROGRESS)
    graded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)
    teacher_comments = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    assessment = relationship("Assessment", back_populates="submissions")
    student = relationship("User", back_populates="assessment_submissions", foreign_keys=[student_id])
    graded_by = relationship("User", foreign_keys=[graded_by_id])
    answers = relationship(
        "SubmissionAnswer",
        back_populates="submission",
        order_by="SubmissionAnswer.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan"
    )


class SubmissionAnswer(Base):
    __tablename__ = "submission_answers"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(Integer, ForeignKey("assessment_submissions.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    # Plain reference: answers to unknown questions are kept as submitted
    question_id = Column(Integer, nullable=False)
    answer = Column(JSON, nullable=True)
    is_correct = Column(Boolean, nullable=True)
    points_awarded = Column(Float, nullable=False, default=0)
    feedback = Column(String, nullable=True)

    submission = relationship("AssessmentSubmission", back_populates="answers")

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Float, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from lms.core.database import Base
from lms.core.constants import AssignmentSubmissionStatusEnum

class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"
    # One submission per student per assignment
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_assignment_submissions_assignment_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    text_submission = Column(String, nullable=True)
    files = Column(JSON, nullable=False, default=list)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    is_late = Column(Boolean, nullable=False, default=False)
    grade = Column(Float, nullable=True)
    late_penalty = Column(Float, nullable=False, default=0)
    feedback = Column(String, nullable=True)
    status = Column(
        Enum(AssignmentSubmissionStatusEnum),
        nullable=False,
        default=AssignmentSubmissionStatusEnum.SUBMITTED
    )
    graded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User", foreign_keys=[student_id])
    graded_by = relationship("User", foreign_keys=[graded_by_id])

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Float, Enum, JSON, event
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship, Session
from sqlalchemy.sql import func
from lms.core.database import Base
from lms.core.constants import (
    AssessmentStatusEnum,
    AssessmentTypeEnum,
    QuestionTypeEnum,
)

DEFAULT_QUESTION_POINTS = 1

class Assessment(Base):
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    instructions = Column(String, nullable=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(Enum(AssessmentTypeEnum), nullable=False)
    total_points = Column(Float, nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=60)  # minutes
    due_date = Column(DateTime(timezone=True), nullable=False)
    start_date = Column(DateTime(timezone=True), server_default=func.now())
    allow_late_submission = Column(Boolean, nullable=False, default=False)
    shuffle_questions = Column(Boolean, nullable=False, default=False)
    show_answers_after_submission = Column(Boolean, nullable=False, default=True)
    attempts_allowed = Column(Integer, nullable=False, default=1)
    passing_score = Column(Float, nullable=False, default=60)  # percentage
    status = Column(Enum(AssessmentStatusEnum), nullable=False, default=AssessmentStatusEnum.DRAFT)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course", back_populates="assessments")
    teacher = relationship("User")
    questions = relationship(
        "Question",
        back_populates="assessment",
        order_by="Question.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan"
    )
    submissions = relationship("AssessmentSubmission", back_populates="assessment", cascade="all, delete-orphan")

    @property
    def has_essay_questions(self) -> bool:
        return any(q.type == QuestionTypeEnum.ESSAY for q in self.questions)

    def question_map(self):
        return {q.id: q for q in self.questions}

    def recalculate_total_points(self):
        self.total_points = sum(
            q.points if q.points is not None else DEFAULT_QUESTION_POINTS
            for q in self.questions
        )


class Question(Base):
    __tablename__ = "assessment_questions"

    id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    type = Column(Enum(QuestionTypeEnum), nullable=False)
    question = Column(String, nullable=False)
    options = Column(JSON, nullable=True)  # [{"text": ..., "is_correct": ...}]
    correct_answer = Column(String, nullable=True)  # short-answer only
    points = Column(Integer, nullable=False, default=DEFAULT_QUESTION_POINTS)
    explanation = Column(String, nullable=True)

    assessment = relationship("Assessment", back_populates="questions")

    @property
    def correct_option(self):
        return next((opt for opt in (self.options or []) if opt.get("is_correct")), None)


@event.listens_for(Session, "before_flush")
def recalculate_assessment_totals(session, flush_context, instances):
    """Keep Assessment.total_points equal to the sum of its question points on every persist."""
    touched = set()
    for obj in list(session.new) + list(session.dirty):
        if isinstance(obj, Assessment):
            touched.add(obj)
        elif isinstance(obj, Question) and obj.assessment is not None:
            touched.add(obj.assessment)
    for assessment in touched:
        if assessment not in session.deleted:
            assessment.recalculate_total_points()

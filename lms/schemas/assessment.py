from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from lms.core.constants import AssessmentStatusEnum, AssessmentTypeEnum
from lms.schemas.question import Question, QuestionCreate
from lms.schemas.user import UserSummary

class CourseSummary(BaseModel):
    id: int
    title: str

    model_config = ConfigDict(from_attributes=True)

class AssessmentBase(BaseModel):
    title: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    type: AssessmentTypeEnum
    duration: int = Field(default=60, gt=0)
    due_date: datetime
    start_date: Optional[datetime] = None
    allow_late_submission: bool = False
    shuffle_questions: bool = False
    show_answers_after_submission: bool = True
    attempts_allowed: int = Field(default=1, ge=1)
    passing_score: float = Field(default=60, ge=0, le=100)
    status: AssessmentStatusEnum = AssessmentStatusEnum.DRAFT

class AssessmentCreate(AssessmentBase):
    """
    Payload for authoring an assessment.

    total_points is not accepted here: it is always derived from the
    questions, and any value sent by the client is dropped.
    """
    course_id: int
    questions: List[QuestionCreate] = []

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Week 3 Quiz",
                "course_id": 1,
                "type": "quiz",
                "due_date": "2030-01-31T23:59:00Z",
                "attempts_allowed": 2,
                "passing_score": 60,
                "status": "published",
                "questions": [
                    {
                        "type": "multiple-choice",
                        "question": "2 + 2 = ?",
                        "options": [{"text": "3", "is_correct": False}, {"text": "4", "is_correct": True}],
                        "points": 2
                    },
                    {"type": "short-answer", "question": "Capital of France?", "correct_answer": "Paris"},
                    {"type": "essay", "question": "Explain recursion.", "points": 5}
                ]
            }
        }
    )

class AssessmentUpdate(AssessmentBase):
    title: Optional[str] = None
    type: Optional[AssessmentTypeEnum] = None
    duration: Optional[int] = Field(default=None, gt=0)
    due_date: Optional[datetime] = None
    allow_late_submission: Optional[bool] = None
    shuffle_questions: Optional[bool] = None
    show_answers_after_submission: Optional[bool] = None
    attempts_allowed: Optional[int] = Field(default=None, ge=1)
    passing_score: Optional[float] = Field(default=None, ge=0, le=100)
    status: Optional[AssessmentStatusEnum] = None
    questions: Optional[List[QuestionCreate]] = None

class Assessment(AssessmentBase):
    id: int
    course_id: int
    teacher_id: int
    total_points: float
    questions: List[Question] = []
    teacher: Optional[UserSummary] = None
    course: Optional[CourseSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class AssessmentSummary(BaseModel):
    id: int
    title: str
    type: AssessmentTypeEnum
    due_date: datetime
    total_points: float
    course: Optional[CourseSummary] = None

    model_config = ConfigDict(from_attributes=True)

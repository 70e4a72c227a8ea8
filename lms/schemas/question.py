from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

from lms.core.constants import QuestionTypeEnum

class QuestionOption(BaseModel):
    text: str
    is_correct: Optional[bool] = False

    model_config = ConfigDict(from_attributes=True)

class QuestionBase(BaseModel):
    type: QuestionTypeEnum
    question: str
    options: Optional[List[QuestionOption]] = None  # multiple-choice and true-false
    correct_answer: Optional[str] = None  # short-answer
    points: int = Field(default=1, gt=0)
    explanation: Optional[str] = None

    @field_validator("question")
    @classmethod
    def not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Question text cannot be empty")
        return v

class QuestionCreate(QuestionBase):
    pass

class Question(QuestionBase):
    id: int
    position: int

    model_config = ConfigDict(from_attributes=True)

    def without_answer_key(self) -> "Question":
        """Copy of the question with correct flags, short-answer key and explanation removed."""
        options = None
        if self.options is not None:
            options = [QuestionOption(text=opt.text, is_correct=None) for opt in self.options]
        return self.model_copy(update={"options": options, "correct_answer": None, "explanation": None})

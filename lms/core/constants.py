from enum import Enum


class RoleEnum(str, Enum):
    TEACHER = "teacher"
    STUDENT = "student"

class QuestionTypeEnum(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"
    ESSAY = "essay"

class AssessmentTypeEnum(str, Enum):
    QUIZ = "quiz"
    TEST = "test"
    EXAM = "exam"
    ASSIGNMENT = "assignment"

class AssessmentStatusEnum(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

class SubmissionStatusEnum(str, Enum):
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"
    GRADED = "graded"
    LATE = "late"

class EnrollmentStatusEnum(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"

# Option-bearing question types, graded against the option flagged correct
CHOICE_QUESTION_TYPES = (QuestionTypeEnum.MULTIPLE_CHOICE, QuestionTypeEnum.TRUE_FALSE)

# (label, lower bound inclusive, upper bound exclusive), highest bucket first
SCORE_BUCKETS = (
    ("90-100", 90, None),
    ("80-89", 80, 90),
    ("70-79", 70, 80),
    ("60-69", 60, 70),
    ("0-59", None, 60),
)

SUBMITTED_AND_GRADED_MESSAGE = "Assessment submitted and graded!"
SUBMITTED_PENDING_REVIEW_MESSAGE = "Assessment submitted! Awaiting teacher review for essay questions."

class AssignmentStatusEnum(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"

class SubmissionTypeEnum(str, Enum):
    FILE = "file"
    TEXT = "text"
    BOTH = "both"

class AssignmentSubmissionStatusEnum(str, Enum):
    SUBMITTED = "submitted"
    GRADED = "graded"
    RETURNED = "returned"

ASSIGNMENT_SUBMITTED_MESSAGE = "Assignment submitted successfully"
ASSIGNMENT_SUBMITTED_LATE_MESSAGE = "Late submission recorded"

"""
Best-effort email notifications for assessment and assignment events.

Services schedule an event on FastAPI's BackgroundTasks; the event bus hands
it to the dispatcher after the response has gone out. Payloads are plain data
because the request's session is closed by then. Delivery failures are logged
and recorded, never raised.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import BackgroundTasks

from lms.core.config import settings
from lms.services.email import EmailService
from lms.utils.events import event_bus

logger = logging.getLogger(__name__)

ASSESSMENT_CREATED = "assessment_created"
SUBMISSION_GRADED = "submission_graded"
ASSIGNMENT_GRADED = "assignment_graded"


@dataclass
class NotificationOutcome:
    event: str
    recipient: str
    status: str  # sent | failed | skipped
    error: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _user_data(user) -> Dict[str, Any]:
    return {"id": user.id, "full_name": user.full_name, "email": user.email}


def _assessment_data(assessment) -> Dict[str, Any]:
    return {
        "id": assessment.id,
        "title": assessment.title,
        "type": getattr(assessment.type, "value", assessment.type),
        "due_date": assessment.due_date.isoformat() if assessment.due_date else None,
        "duration": assessment.duration,
        "total_points": assessment.total_points,
        "passing_score": assessment.passing_score,
    }


def _assignment_data(assignment) -> Dict[str, Any]:
    return {
        "id": assignment.id,
        "title": assignment.title,
        "due_date": assignment.due_date.isoformat() if assignment.due_date else None,
        "total_points": assignment.total_points,
    }


class NotificationDispatcher:

    def __init__(self, max_outcomes: int = 500):
        # Bounded: oldest outcomes fall off once the buffer is full
        self._outcomes = deque(maxlen=max_outcomes)

    def recent_outcomes(self, limit: Optional[int] = None) -> List[NotificationOutcome]:
        outcomes = list(self._outcomes)
        return outcomes[-limit:] if limit else outcomes

    def clear(self):
        self._outcomes.clear()

    def schedule_assessment_created(self, background_tasks: BackgroundTasks, *, students, assessment, course, teacher):
        if not students:
            logger.info(f"No active students to notify for assessment {assessment.id}")
            return
        payload = {
            "students": [_user_data(s) for s in students],
            "assessment": _assessment_data(assessment),
            "course": {"id": course.id, "title": course.title},
            "teacher": _user_data(teacher),
        }
        background_tasks.add_task(event_bus.publish, ASSESSMENT_CREATED, payload)

    def schedule_graded(self, background_tasks: BackgroundTasks, *, student, assessment, submission, teacher):
        payload = {
            "student": _user_data(student),
            "assessment": _assessment_data(assessment),
            "submission": {
                "id": submission.id,
                "score": submission.score,
                "percentage": submission.percentage,
                "passed": submission.passed,
                "attempt_number": submission.attempt_number,
                "teacher_comments": submission.teacher_comments,
            },
            "teacher": _user_data(teacher),
        }
        background_tasks.add_task(event_bus.publish, SUBMISSION_GRADED, payload)

    def schedule_assignment_graded(self, background_tasks: BackgroundTasks, *, student, assignment, submission, teacher):
        payload = {
            "student": _user_data(student),
            "assignment": _assignment_data(assignment),
            "submission": {
                "id": submission.id,
                "grade": submission.grade,
                "late_penalty": submission.late_penalty,
                "is_late": submission.is_late,
                "feedback": submission.feedback,
            },
            "teacher": _user_data(teacher),
        }
        background_tasks.add_task(event_bus.publish, ASSIGNMENT_GRADED, payload)

    async def _deliver(self, event: str, to_email: str, subject: str, template_name: str, context: dict) -> NotificationOutcome:
        if not EmailService.is_configured():
            logger.warning(f"SENDGRID_API_KEY not set, skipping '{event}' email to {to_email}")
            outcome = NotificationOutcome(event=event, recipient=to_email, status="skipped")
        else:
            try:
                await EmailService.send_email(to_email, subject, template_name, context)
                outcome = NotificationOutcome(event=event, recipient=to_email, status="sent")
            except Exception as e:
                logger.error(f"Failed to send '{event}' email to {to_email}: {e}")
                outcome = NotificationOutcome(event=event, recipient=to_email, status="failed", error=str(e))
        self._outcomes.append(outcome)
        return outcome

    async def notify_assessment_created(self, data: Dict[str, Any]) -> List[NotificationOutcome]:
        assessment = data["assessment"]
        course = data["course"]
        subject = f"New {assessment['type'].title()}: {assessment['title']} | {course['title']}"

        outcomes = []
        for student in data["students"]:
            outcomes.append(await self._deliver(
                ASSESSMENT_CREATED,
                student["email"],
                subject,
                "assessment_created.html",
                {
                    "student": student,
                    "assessment": assessment,
                    "course": course,
                    "teacher": data["teacher"],
                }
            ))

        sent = sum(1 for o in outcomes if o.status == "sent")
        logger.info(f"Assessment {assessment['id']} notifications: {sent}/{len(outcomes)} sent")
        return outcomes

    async def notify_graded(self, data: Dict[str, Any]) -> NotificationOutcome:
        assessment = data["assessment"]
        return await self._deliver(
            SUBMISSION_GRADED,
            data["student"]["email"],
            f"Your {assessment['type']} \"{assessment['title']}\" has been graded",
            "assessment_graded.html",
            {
                "student": data["student"],
                "assessment": assessment,
                "submission": data["submission"],
                "teacher": data["teacher"],
            }
        )

    async def notify_assignment_graded(self, data: Dict[str, Any]) -> NotificationOutcome:
        assignment = data["assignment"]
        return await self._deliver(
            ASSIGNMENT_GRADED,
            data["student"]["email"],
            f"Your assignment \"{assignment['title']}\" has been graded",
            "assignment_graded.html",
            {
                "student": data["student"],
                "assignment": assignment,
                "submission": data["submission"],
                "teacher": data["teacher"],
            }
        )


notification_dispatcher = NotificationDispatcher(max_outcomes=settings.NOTIFICATION_LOG_SIZE)


async def handle_assessment_created(data):
    await notification_dispatcher.notify_assessment_created(data)


async def handle_submission_graded(data):
    await notification_dispatcher.notify_graded(data)


async def handle_assignment_graded(data):
    await notification_dispatcher.notify_assignment_graded(data)


event_bus.subscribe(ASSESSMENT_CREATED, handle_assessment_created)
event_bus.subscribe(SUBMISSION_GRADED, handle_submission_graded)
event_bus.subscribe(ASSIGNMENT_GRADED, handle_assignment_graded)

from datetime import datetime, timedelta, timezone

from lms.core.security import create_access_token


def auth_headers_for(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}


def future(days: int = 7) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def past(days: float = 1) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def mixed_questions():
    """Multiple-choice (2 pts), true-false (1), short-answer (3), essay (4): 10 points."""
    return [
        {
            "type": "multiple-choice",
            "question": "2 + 2 = ?",
            "options": [
                {"text": "3", "is_correct": False},
                {"text": "4", "is_correct": True},
                {"text": "5", "is_correct": False}
            ],
            "points": 2
        },
        {
            "type": "true-false",
            "question": "Python is dynamically typed.",
            "options": [{"text": "True", "is_correct": True}, {"text": "False", "is_correct": False}],
            "points": 1
        },
        {"type": "short-answer", "question": "Capital of France?", "correct_answer": "Paris", "points": 3},
        {"type": "essay", "question": "Explain recursion.", "points": 4}
    ]


def objective_questions():
    """Multiple-choice (5 pts), short-answer (3), true-false (2): 10 points, no essay."""
    return [
        {
            "type": "multiple-choice",
            "question": "Largest planet?",
            "options": [{"text": "Mars", "is_correct": False}, {"text": "Jupiter", "is_correct": True}],
            "points": 5
        },
        {"type": "short-answer", "question": "Chemical symbol for gold?", "correct_answer": "Au", "points": 3},
        {
            "type": "true-false",
            "question": "The sun is a star.",
            "options": [{"text": "True", "is_correct": True}, {"text": "False", "is_correct": False}],
            "points": 2
        }
    ]

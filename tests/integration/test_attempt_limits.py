from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lms.core.constants import EnrollmentStatusEnum
from lms.core.exceptions import AttemptLimitExceeded, ConflictError
from lms.crud.assessment_submission import assessment_submission as crud_submission
from lms.models.assessment_submission import AssessmentSubmission
from lms.schemas.assessment_submission import SubmitAssessment
from lms.schemas.user import User, UserContext
from lms.services.assessment_submission import assessment_submission_service
from tests.helpers.asserts import api_call, assert_error


def _submit(client, assessment, headers, **extra):
    return client.post(f"/assessments/{assessment.id}/submit", headers=headers, json={"answers": [], **extra})


def test_attempts_are_numbered_until_limit(
    client: TestClient, db_session: Session, assessment_factory, enrolled_student, student_headers
):
    print("\n[TEST] Attempt limit")
    assessment = assessment_factory(attempts_allowed=3)

    for expected in (1, 2, 3):
        r = api_call(client, "POST", f"/assessments/{assessment.id}/submit", headers=student_headers,
                     json={"answers": []})
        assert r.json()["data"]["attempt_number"] == expected
        print(f"[OK] Attempt {expected} accepted")

    r = _submit(client, assessment, student_headers)
    assert_error(r, 400, "ATTEMPT_LIMIT_EXCEEDED", "Maximum attempts (3) reached")
    print("[OK] Fourth attempt rejected")

    assert db_session.query(AssessmentSubmission).filter_by(assessment_id=assessment.id).count() == 3


def test_latest_attempt_is_shown_to_student(client: TestClient, assessment_factory, enrolled_student, student_headers):
    assessment = assessment_factory(attempts_allowed=2)
    mc = assessment.questions[0]
    api_call(client, "POST", f"/assessments/{assessment.id}/submit", headers=student_headers,
             json={"answers": [{"question_id": mc.id, "answer": "Mars"}]})
    api_call(client, "POST", f"/assessments/{assessment.id}/submit", headers=student_headers,
             json={"answers": [{"question_id": mc.id, "answer": "Jupiter"}]})

    r = api_call(client, "GET", f"/assessments/{assessment.id}", headers=student_headers)
    submission = r.json()["data"]["submission"]
    assert submission["attempt_number"] == 2
    assert submission["score"] == 5


def test_attempts_are_counted_per_student(
    client: TestClient, course, enroll, student, other_student, assessment_factory, student_headers, other_student_headers
):
    enroll(student, course)
    enroll(other_student, course)
    assessment = assessment_factory()

    assert api_call(client, "POST", f"/assessments/{assessment.id}/submit", headers=student_headers,
                    json={"answers": []}).json()["data"]["attempt_number"] == 1
    assert api_call(client, "POST", f"/assessments/{assessment.id}/submit", headers=other_student_headers,
                    json={"answers": []}).json()["data"]["attempt_number"] == 1


def test_submission_requires_enrollment(client: TestClient, assessment_factory, student, student_headers):
    assessment = assessment_factory()
    assert_error(_submit(client, assessment, student_headers), 403, "NOT_ENROLLED")


def test_dropped_enrollment_cannot_submit(client: TestClient, course, student, enroll, assessment_factory, student_headers):
    enroll(student, course, status=EnrollmentStatusEnum.DROPPED)
    assessment = assessment_factory()
    assert_error(_submit(client, assessment, student_headers), 403, "NOT_ENROLLED")


def test_teacher_cannot_submit(client: TestClient, assessment_factory, teacher_headers):
    assessment = assessment_factory()
    assert_error(_submit(client, assessment, teacher_headers), 403, "FORBIDDEN")


def test_submit_to_missing_assessment(client: TestClient, enrolled_student, student_headers):
    r = client.post("/assessments/31337/submit", headers=student_headers, json={"answers": []})
    assert_error(r, 404, "NOT_FOUND", "Assessment not found")


def test_draft_assessment_cannot_be_submitted(
    client: TestClient, db_session: Session, assessment_factory, enrolled_student, student_headers
):
    draft = assessment_factory(status="draft")

    assert_error(client.get(f"/assessments/{draft.id}", headers=student_headers), 404, "NOT_FOUND")
    assert_error(_submit(client, draft, student_headers), 404, "NOT_FOUND", "Assessment not found")
    assert db_session.query(AssessmentSubmission).count() == 0


def test_archived_assessment_is_closed(
    client: TestClient, db_session: Session, assessment_factory, enrolled_student, student_headers
):
    archived = assessment_factory(status="archived")

    r = _submit(client, archived, student_headers)
    assert_error(r, 400, "SUBMISSION_CLOSED", "archived")
    assert db_session.query(AssessmentSubmission).count() == 0


def test_submission_after_due_date_is_closed(
    client: TestClient, db_session: Session, assessment_factory, enrolled_student, student_headers
):
    assessment = assessment_factory(due_date=datetime.now(timezone.utc) - timedelta(hours=1))
    assert_error(_submit(client, assessment, student_headers), 400, "SUBMISSION_CLOSED")
    assert db_session.query(AssessmentSubmission).count() == 0


def test_late_submission_allowed_when_enabled(client: TestClient, assessment_factory, enrolled_student, student_headers):
    assessment = assessment_factory(
        due_date=datetime.now(timezone.utc) - timedelta(days=1),
        allow_late_submission=True
    )
    r = _submit(client, assessment, student_headers)
    assert r.status_code == 201
    assert r.json()["data"]["status"] == "graded"


def test_started_at_in_future_is_rejected(client: TestClient, assessment_factory, enrolled_student, student_headers):
    assessment = assessment_factory()
    started_at = (datetime.now(timezone.utc) + timedelta(minutes=10)).isoformat()
    r = _submit(client, assessment, student_headers, started_at=started_at)
    assert_error(r, 400, "VALIDATION_FAILURE", "started_at cannot be in the future")


class TestConcurrentSubmission:
    """
    Two requests can both count N prior attempts before either inserts.
    The unique (student, assessment, attempt_number) constraint lets only one
    of them win; the loser is told why.
    """

    def _context(self, student):
        return UserContext(user=User.model_validate(student))

    def _stale_count(self, monkeypatch):
        real_count = crud_submission.count_by_student_and_assessment
        calls = {"n": 0}

        def _count(db, student_id, assessment_id):
            calls["n"] += 1
            if calls["n"] == 1:
                return 0
            return real_count(db, student_id=student_id, assessment_id=assessment_id)

        monkeypatch.setattr(crud_submission, "count_by_student_and_assessment", _count)

    def test_loser_hits_attempt_limit(self, db_session: Session, monkeypatch, assessment_factory, enrolled_student):
        assessment = assessment_factory(attempts_allowed=1)
        context = self._context(enrolled_student)
        assessment_submission_service.submit_assessment(db_session, assessment.id, SubmitAssessment(answers=[]), context)
        db_session.commit()

        self._stale_count(monkeypatch)
        with pytest.raises(AttemptLimitExceeded) as exc_info:
            assessment_submission_service.submit_assessment(
                db_session, assessment.id, SubmitAssessment(answers=[]), context
            )
        assert exc_info.value.detail == "Maximum attempts (1) reached"
        assert db_session.query(AssessmentSubmission).count() == 1

    def test_loser_with_attempts_left_gets_conflict(
        self, db_session: Session, monkeypatch, assessment_factory, enrolled_student
    ):
        assessment = assessment_factory(attempts_allowed=3)
        context = self._context(enrolled_student)
        assessment_submission_service.submit_assessment(db_session, assessment.id, SubmitAssessment(answers=[]), context)
        db_session.commit()

        self._stale_count(monkeypatch)
        with pytest.raises(ConflictError):
            assessment_submission_service.submit_assessment(
                db_session, assessment.id, SubmitAssessment(answers=[]), context
            )
        assert db_session.query(AssessmentSubmission).count() == 1

        # A retry sees the committed attempt and moves on to the next number
        submission, _ = assessment_submission_service.submit_assessment(
            db_session, assessment.id, SubmitAssessment(answers=[]), context
        )
        assert submission.attempt_number == 2

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lms.core.constants import AssignmentStatusEnum, SubmissionTypeEnum
from lms.models.assignment_submission import AssignmentSubmission
from lms.models.grade import Grade
from lms.services.email import EmailService
from lms.services.notification import ASSIGNMENT_GRADED, notification_dispatcher
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.factories import past

ESSAY_LINK = {"name": "essay.pdf", "url": "https://files.example.com/essay.pdf"}


def _submit(client, assignment, headers, **body):
    payload = {"assignment_id": assignment.id}
    payload.update(body)
    return client.post("/submissions/", headers=headers, json=payload)


def test_on_time_submission(client: TestClient, enrolled_student, student, student_headers, assignment_factory):
    assignment = assignment_factory()

    r = _submit(client, assignment, student_headers, text_submission="My essay", files=[ESSAY_LINK])
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Assignment submitted successfully"
    data = body["data"]
    assert data["student_id"] == student.id
    assert data["is_late"] is False
    assert data["status"] == "submitted"
    assert data["grade"] is None
    assert data["files"] == [ESSAY_LINK]


def test_late_submission_is_flagged_when_allowed(client: TestClient, enrolled_student, student_headers, assignment_factory):
    assignment = assignment_factory(due_date=past(1), allow_late_submission=True)

    r = _submit(client, assignment, student_headers, text_submission="Sorry, late")
    assert r.status_code == 201
    assert r.json()["message"] == "Late submission recorded"
    assert r.json()["data"]["is_late"] is True


def test_late_submission_rejected_when_not_allowed(
    client: TestClient, db_session: Session, enrolled_student, student_headers, assignment_factory
):
    assignment = assignment_factory(due_date=past(1))

    r = _submit(client, assignment, student_headers, text_submission="Too late")
    assert_error(r, 400, "SUBMISSION_CLOSED", "Late submissions are not allowed for this assignment")
    assert db_session.query(AssignmentSubmission).count() == 0


def test_duplicate_submission_rejected(client: TestClient, enrolled_student, student_headers, assignment_factory):
    assignment = assignment_factory()
    api_call(client, "POST", "/submissions/", headers=student_headers,
             json={"assignment_id": assignment.id, "text_submission": "First"})

    r = _submit(client, assignment, student_headers, text_submission="Second")
    assert_error(r, 400, "VALIDATION_FAILURE", "You have already submitted this assignment")


def test_submission_requires_active_enrollment(client: TestClient, student_headers, assignment_factory):
    assignment = assignment_factory()

    r = _submit(client, assignment, student_headers, text_submission="Hi")
    assert_error(r, 403, "NOT_ENROLLED", "You are not enrolled in this course")


def test_draft_and_closed_assignments_refuse_submissions(
    client: TestClient, enrolled_student, student_headers, assignment_factory
):
    draft = assignment_factory(status=AssignmentStatusEnum.DRAFT)
    closed = assignment_factory(status=AssignmentStatusEnum.CLOSED)

    r = _submit(client, draft, student_headers, text_submission="Hi")
    assert_error(r, 404, "NOT_FOUND", "Assignment not found")

    r = _submit(client, closed, student_headers, text_submission="Hi")
    assert_error(r, 400, "SUBMISSION_CLOSED", "closed")


def test_teachers_cannot_submit(client: TestClient, teacher_headers, assignment_factory):
    assignment = assignment_factory()
    r = _submit(client, assignment, teacher_headers, text_submission="Hi")
    assert_error(r, 403, "FORBIDDEN")


def test_submission_content_must_match_type(client: TestClient, enrolled_student, student_headers, assignment_factory):
    text_only = assignment_factory(submission_type=SubmissionTypeEnum.TEXT)
    file_only = assignment_factory(submission_type=SubmissionTypeEnum.FILE)
    either = assignment_factory(submission_type=SubmissionTypeEnum.BOTH)

    r = _submit(client, text_only, student_headers, text_submission="Text", files=[ESSAY_LINK])
    assert_error(r, 400, "VALIDATION_FAILURE", "This assignment does not accept files")
    r = _submit(client, text_only, student_headers, text_submission="   ")
    assert_error(r, 400, "VALIDATION_FAILURE", "This assignment requires a text submission")

    r = _submit(client, file_only, student_headers, text_submission="Text")
    assert_error(r, 400, "VALIDATION_FAILURE", "This assignment requires at least one file")
    r = _submit(client, file_only, student_headers, text_submission="Text", files=[ESSAY_LINK])
    assert_error(r, 400, "VALIDATION_FAILURE", "This assignment does not accept a text submission")

    r = _submit(client, either, student_headers)
    assert_error(r, 400, "VALIDATION_FAILURE", "Submission must include text or files")

    assert _submit(client, file_only, student_headers, files=[ESSAY_LINK]).status_code == 201


def test_grading_on_time_submission(
    client: TestClient, db_session: Session, enrolled_student, student, student_headers, teacher, teacher_headers,
    assignment_factory
):
    assignment = assignment_factory()
    submission_id = api_call(client, "POST", "/submissions/", headers=student_headers,
                             json={"assignment_id": assignment.id, "text_submission": "Essay"}).json()["data"]["id"]

    r = api_call(client, "PUT", f"/submissions/{submission_id}/grade", headers=teacher_headers,
                 json={"grade": 85, "feedback": "Well argued"})
    assert r.json()["message"] == "Submission graded successfully"
    data = r.json()["data"]
    assert data["grade"] == 85
    assert data["late_penalty"] == 0
    assert data["status"] == "graded"
    assert data["graded_by_id"] == teacher.id
    assert data["graded_at"] is not None

    entry = db_session.query(Grade).one()
    assert (entry.student_id, entry.assignment_id, entry.submission_id) == (student.id, assignment.id, submission_id)
    assert entry.score == 85
    assert entry.feedback == "Well argued"


def test_late_penalty_deducted_per_started_day(
    client: TestClient, enrolled_student, student_headers, teacher_headers, assignment_factory
):
    # 2.5 days late rounds up to 3 days at 10% a day
    assignment = assignment_factory(due_date=past(2.5), allow_late_submission=True, late_submission_penalty=10)
    submission_id = _submit(client, assignment, student_headers, text_submission="Late essay").json()["data"]["id"]

    r = api_call(client, "PUT", f"/submissions/{submission_id}/grade", headers=teacher_headers, json={"grade": 80})
    data = r.json()["data"]
    assert data["grade"] == 56
    assert data["late_penalty"] == 24


def test_late_penalty_floors_at_zero(client: TestClient, enrolled_student, student_headers, teacher_headers, assignment_factory):
    assignment = assignment_factory(due_date=past(3.5), allow_late_submission=True, late_submission_penalty=50)
    submission_id = _submit(client, assignment, student_headers, text_submission="Very late").json()["data"]["id"]

    r = api_call(client, "PUT", f"/submissions/{submission_id}/grade", headers=teacher_headers, json={"grade": 60})
    assert r.json()["data"]["grade"] == 0
    assert r.json()["data"]["late_penalty"] == 60


def test_grade_must_be_within_total_points(
    client: TestClient, enrolled_student, student_headers, teacher_headers, assignment_factory
):
    assignment = assignment_factory(total_points=50)
    submission_id = _submit(client, assignment, student_headers, text_submission="Essay").json()["data"]["id"]

    r = client.put(f"/submissions/{submission_id}/grade", headers=teacher_headers, json={"grade": 51})
    assert_error(r, 400, "VALIDATION_FAILURE", "Grade must be between 0 and 50")

    r = client.put(f"/submissions/{submission_id}/grade", headers=teacher_headers, json={"grade": -1})
    assert_error(r, 400, "VALIDATION_FAILURE", "Grade must be between 0 and 50")


def test_regrading_replaces_grade_book_entry(
    client: TestClient, db_session: Session, enrolled_student, student_headers, teacher_headers, assignment_factory
):
    assignment = assignment_factory()
    submission_id = _submit(client, assignment, student_headers, text_submission="Essay").json()["data"]["id"]

    api_call(client, "PUT", f"/submissions/{submission_id}/grade", headers=teacher_headers, json={"grade": 60})
    api_call(client, "PUT", f"/submissions/{submission_id}/grade", headers=teacher_headers,
             json={"grade": 75, "feedback": "Improved on review"})

    entry = db_session.query(Grade).one()
    assert entry.score == 75
    assert entry.feedback == "Improved on review"


def test_only_owner_grades(
    client: TestClient, enrolled_student, student_headers, other_teacher_headers, assignment_factory
):
    assignment = assignment_factory()
    submission_id = _submit(client, assignment, student_headers, text_submission="Essay").json()["data"]["id"]

    r = client.put(f"/submissions/{submission_id}/grade", headers=other_teacher_headers, json={"grade": 90})
    assert_error(r, 403, "FORBIDDEN", "Not authorized to grade this submission")

    r = client.put(f"/submissions/{submission_id}/grade", headers=student_headers, json={"grade": 100})
    assert_error(r, 403, "FORBIDDEN")

    r = client.put("/submissions/9999/grade", headers=other_teacher_headers, json={"grade": 90})
    assert_error(r, 404, "NOT_FOUND", "Submission not found")


def test_grading_emails_the_student(
    client: TestClient, enrolled_student, student, student_headers, teacher_headers, assignment_factory, email_outbox
):
    assignment = assignment_factory(title="Engine Essay", due_date=past(0.5), allow_late_submission=True)
    submission_id = _submit(client, assignment, student_headers, text_submission="Essay").json()["data"]["id"]

    api_call(client, "PUT", f"/submissions/{submission_id}/grade", headers=teacher_headers,
             json={"grade": 90, "feedback": "Lovely diagrams"})

    assert len(email_outbox) == 1
    mail = email_outbox[0]
    assert mail["to"] == student.email
    assert mail["subject"] == 'Your assignment "Engine Essay" has been graded'
    assert "Ada Lovelace" in mail["html"]
    assert "Grace Hopper" in mail["html"]
    assert "Lovely diagrams" in mail["html"]
    assert "points were deducted" in mail["html"]

    outcomes = notification_dispatcher.recent_outcomes()
    assert [(o.event, o.status) for o in outcomes] == [(ASSIGNMENT_GRADED, "sent")]


def test_email_failure_does_not_fail_grading(
    client: TestClient, monkeypatch, enrolled_student, student_headers, teacher_headers, assignment_factory, email_outbox
):
    async def _boom(to_email, subject, html_content):
        raise RuntimeError("SendGrid is down")

    monkeypatch.setattr(EmailService, "_send_email_via_sendgrid", staticmethod(_boom))

    assignment = assignment_factory()
    submission_id = _submit(client, assignment, student_headers, text_submission="Essay").json()["data"]["id"]

    r = client.put(f"/submissions/{submission_id}/grade", headers=teacher_headers, json={"grade": 70})
    assert r.status_code == 200
    outcomes = notification_dispatcher.recent_outcomes()
    assert [(o.event, o.status) for o in outcomes] == [(ASSIGNMENT_GRADED, "failed")]


def test_get_submission_permissions(
    client: TestClient, enrolled_student, student_headers, other_student_headers, teacher_headers,
    other_teacher_headers, assignment_factory
):
    assignment = assignment_factory()
    submission_id = _submit(client, assignment, student_headers, text_submission="Essay").json()["data"]["id"]

    r = api_call(client, "GET", f"/submissions/{submission_id}", headers=student_headers)
    assert r.json()["data"]["assignment"]["id"] == assignment.id

    api_call(client, "GET", f"/submissions/{submission_id}", headers=teacher_headers)

    for headers in (other_student_headers, other_teacher_headers):
        r = client.get(f"/submissions/{submission_id}", headers=headers)
        assert_error(r, 403, "FORBIDDEN", "Not authorized to view this submission")


def test_withdraw_submission(
    client: TestClient, db_session: Session, enrolled_student, student_headers, other_student_headers, teacher_headers,
    assignment_factory
):
    assignment = assignment_factory()
    submission_id = _submit(client, assignment, student_headers, text_submission="Draft thoughts").json()["data"]["id"]

    r = client.delete(f"/submissions/{submission_id}", headers=other_student_headers)
    assert_error(r, 403, "FORBIDDEN", "Not authorized to delete this submission")

    r = api_call(client, "DELETE", f"/submissions/{submission_id}", headers=student_headers)
    assert r.json()["data"] == {"submission_id": submission_id}
    assert db_session.query(AssignmentSubmission).count() == 0

    # A withdrawn submission can be replaced
    assert _submit(client, assignment, student_headers, text_submission="Final").status_code == 201


def test_graded_submission_cannot_be_withdrawn(
    client: TestClient, enrolled_student, student_headers, teacher_headers, assignment_factory
):
    assignment = assignment_factory()
    submission_id = _submit(client, assignment, student_headers, text_submission="Essay").json()["data"]["id"]
    api_call(client, "PUT", f"/submissions/{submission_id}/grade", headers=teacher_headers, json={"grade": 70})

    r = client.delete(f"/submissions/{submission_id}", headers=student_headers)
    assert_error(r, 400, "VALIDATION_FAILURE", "Cannot delete a graded submission")


def test_submission_listings(
    client: TestClient, course, enroll, student, other_student, student_headers, other_student_headers,
    teacher_headers, other_teacher_headers, assignment_factory
):
    enroll(student, course)
    enroll(other_student, course)
    first = assignment_factory(title="First")
    second = assignment_factory(title="Second")

    _submit(client, first, student_headers, text_submission="A")
    _submit(client, second, student_headers, text_submission="B")
    _submit(client, first, other_student_headers, text_submission="C")

    r = api_call(client, "GET", "/submissions/my-submissions", headers=student_headers)
    data = r.json()["data"]
    assert data["count"] == 2
    assert [s["assignment"]["title"] for s in data["submissions"]] == ["Second", "First"]

    r = api_call(client, "GET", f"/assignments/{first.id}/submissions", headers=teacher_headers)
    data = r.json()["data"]
    assert data["count"] == 2
    assert {s["student"]["full_name"] for s in data["submissions"]} == {"Ada Lovelace", "Katherine Johnson"}

    r = client.get(f"/assignments/{first.id}/submissions", headers=other_teacher_headers)
    assert_error(r, 403, "FORBIDDEN", "Not authorized to view these submissions")

    r = client.get("/submissions/my-submissions", headers=teacher_headers)
    assert_error(r, 403, "FORBIDDEN")

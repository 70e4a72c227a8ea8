from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lms.models.assessment import Assessment
from lms.models.assignment import Assignment
from lms.models.assignment_submission import AssignmentSubmission
from lms.models.course import Course
from lms.models.course_enrollment import CourseEnrollment
from tests.helpers.asserts import api_call, assert_error


def test_teacher_creates_course(client: TestClient, teacher, teacher_headers):
    r = api_call(client, "POST", "/courses/", headers=teacher_headers,
                 json={"title": "Algorithms", "description": "Sorting and searching", "duration": "8 weeks"})
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    data = body["data"]
    assert data["title"] == "Algorithms"
    assert data["teacher_id"] == teacher.id
    assert data["teacher"]["full_name"] == teacher.full_name
    assert data["total_enrolled_students"] == 0


def test_student_cannot_create_course(client: TestClient, student_headers):
    r = client.post("/courses/", headers=student_headers, json={"title": "Nope"})
    assert_error(r, 403, "FORBIDDEN", "User role student is not authorized to access this route")


def test_blank_title_is_rejected(client: TestClient, teacher_headers):
    r = client.post("/courses/", headers=teacher_headers, json={"title": "   "})
    body = assert_error(r, 422, "VALIDATION_ERROR")
    assert body["error"]["details"]["validation_errors"]


def test_missing_or_bad_token(client: TestClient):
    r = client.post("/courses/", json={"title": "Anonymous"})
    assert r.status_code in (401, 403)
    assert r.json()["success"] is False

    r = client.post("/courses/", headers={"Authorization": "Bearer not-a-jwt"}, json={"title": "Forged"})
    assert_error(r, 401, "UNAUTHORIZED")


def test_inactive_user_is_refused(client: TestClient, user_factory):
    from lms.core.constants import RoleEnum
    from tests.helpers.factories import auth_headers_for

    inactive = user_factory(RoleEnum.TEACHER, is_active=False)
    r = client.post("/courses/", headers=auth_headers_for(inactive), json={"title": "Ghost course"})
    assert_error(r, 403, "FORBIDDEN", "inactive")


def test_list_and_get_courses_are_public(client: TestClient, course):
    r = api_call(client, "GET", "/courses/")
    assert [c["id"] for c in r.json()["data"]] == [course.id]

    r = api_call(client, "GET", f"/courses/{course.id}")
    assert r.json()["data"]["title"] == course.title


def test_get_missing_course(client: TestClient):
    assert_error(client.get("/courses/9999"), 404, "NOT_FOUND", "Course not found")


def test_my_courses_only_lists_own(client: TestClient, course, teacher_headers, other_teacher_headers):
    api_call(client, "POST", "/courses/", headers=other_teacher_headers, json={"title": "Someone else's"})

    r = api_call(client, "GET", "/courses/me", headers=teacher_headers)
    assert [c["id"] for c in r.json()["data"]] == [course.id]


def test_my_courses_requires_teacher(client: TestClient, student_headers):
    assert_error(client.get("/courses/me", headers=student_headers), 403, "FORBIDDEN")


def test_owner_updates_course(client: TestClient, course, teacher_headers):
    r = api_call(client, "PUT", f"/courses/{course.id}", headers=teacher_headers, json={"title": "Intro to Computing II"})
    data = r.json()["data"]
    assert data["title"] == "Intro to Computing II"
    assert data["description"] == "Basics"


def test_non_owner_cannot_update_or_delete(client: TestClient, course, other_teacher_headers):
    r = client.put(f"/courses/{course.id}", headers=other_teacher_headers, json={"title": "Hijacked"})
    assert_error(r, 403, "FORBIDDEN", "Not authorized to update this course")

    r = client.delete(f"/courses/{course.id}", headers=other_teacher_headers)
    assert_error(r, 403, "FORBIDDEN", "Not authorized to delete this course")


def test_delete_course_cascades(
    client: TestClient, db_session: Session, course, teacher_headers, enrolled_student, student_headers,
    assessment_factory, assignment_factory
):
    assessment = assessment_factory()
    api_call(client, "POST", f"/assessments/{assessment.id}/submit", headers=student_headers,
             json={"answers": [{"question_id": q.id, "answer": "x"} for q in assessment.questions]})
    assignment = assignment_factory()
    api_call(client, "POST", "/submissions/", headers=student_headers,
             json={"assignment_id": assignment.id, "text_submission": "My essay"})

    r = api_call(client, "DELETE", f"/courses/{course.id}", headers=teacher_headers)
    assert r.json()["data"] == {
        "course_id": course.id, "deleted_enrollments": 1, "deleted_assessments": 1, "deleted_assignments": 1
    }

    assert db_session.query(Course).count() == 0
    assert db_session.query(CourseEnrollment).count() == 0
    assert db_session.query(Assessment).count() == 0
    assert db_session.query(Assignment).count() == 0
    assert db_session.query(AssignmentSubmission).count() == 0

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lms.core.constants import EnrollmentStatusEnum
from lms.models.course_enrollment import CourseEnrollment
from tests.helpers.asserts import api_call, assert_error


def test_student_enrolls(client: TestClient, course, student, student_headers):
    r = api_call(client, "POST", "/enrollments/", headers=student_headers, json={"course_id": course.id})
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["student_id"] == student.id
    assert data["course_id"] == course.id
    assert data["status"] == "active"
    assert data["course"]["title"] == course.title


def test_enrolling_twice_fails(client: TestClient, course, enrolled_student, student_headers):
    r = client.post("/enrollments/", headers=student_headers, json={"course_id": course.id})
    assert_error(r, 400, "VALIDATION_FAILURE", "You are already enrolled in this course")


def test_dropped_student_can_re_enroll(client: TestClient, course, student, student_headers, enroll, db_session: Session):
    enroll(student, course, status=EnrollmentStatusEnum.DROPPED)

    r = api_call(client, "POST", "/enrollments/", headers=student_headers, json={"course_id": course.id})
    assert r.json()["data"]["status"] == "active"
    assert db_session.query(CourseEnrollment).count() == 1


def test_enroll_in_missing_course(client: TestClient, student_headers):
    assert_error(client.post("/enrollments/", headers=student_headers, json={"course_id": 404}), 404, "NOT_FOUND")


def test_teacher_cannot_enroll(client: TestClient, course, teacher_headers):
    assert_error(client.post("/enrollments/", headers=teacher_headers, json={"course_id": course.id}), 403, "FORBIDDEN")


def test_my_enrollments_and_check(client: TestClient, course, enrolled_student, student_headers, other_student_headers):
    r = api_call(client, "GET", "/enrollments/me", headers=student_headers)
    assert [e["course_id"] for e in r.json()["data"]] == [course.id]

    r = api_call(client, "GET", f"/enrollments/check/{course.id}", headers=student_headers)
    assert r.json()["data"] == {"course_id": course.id, "enrolled": True}

    r = api_call(client, "GET", f"/enrollments/check/{course.id}", headers=other_student_headers)
    assert r.json()["data"]["enrolled"] is False


def test_student_unenrolls(client: TestClient, course, student, enroll, student_headers):
    enrollment = enroll(student, course)

    api_call(client, "DELETE", f"/enrollments/{enrollment.id}", headers=student_headers)

    r = api_call(client, "GET", f"/enrollments/check/{course.id}", headers=student_headers)
    assert r.json()["data"]["enrolled"] is False


def test_student_cannot_unenroll_someone_else(client: TestClient, course, student, enroll, other_student_headers):
    enrollment = enroll(student, course)
    r = client.delete(f"/enrollments/{enrollment.id}", headers=other_student_headers)
    assert_error(r, 403, "FORBIDDEN", "You can only unenroll yourself")


def test_course_owner_lists_and_removes_students(
    client: TestClient, course, student, other_student, enroll, teacher_headers, db_session: Session
):
    enroll(student, course)
    enrollment = enroll(other_student, course)

    r = api_call(client, "GET", f"/enrollments/course/{course.id}", headers=teacher_headers)
    assert {e["student_id"] for e in r.json()["data"]} == {student.id, other_student.id}

    api_call(client, "DELETE", f"/enrollments/{enrollment.id}/remove", headers=teacher_headers)
    remaining = db_session.query(CourseEnrollment).all()
    assert [e.student_id for e in remaining] == [student.id]


def test_other_teacher_cannot_manage_enrollments(client: TestClient, course, student, enroll, other_teacher_headers):
    enrollment = enroll(student, course)

    r = client.get(f"/enrollments/course/{course.id}", headers=other_teacher_headers)
    assert_error(r, 403, "FORBIDDEN")

    r = client.delete(f"/enrollments/{enrollment.id}/remove", headers=other_teacher_headers)
    assert_error(r, 403, "FORBIDDEN", "Not authorized to remove students from this course")


def test_missing_enrollment(client: TestClient, student_headers):
    assert_error(client.delete("/enrollments/777", headers=student_headers), 404, "NOT_FOUND", "Enrollment not found")

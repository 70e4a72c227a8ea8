import sys
import os
import tempfile
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "lms-test-logs"))
os.environ["SENDGRID_API_KEY"] = ""

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from lms.core.config import settings
from lms.core.constants import AssessmentStatusEnum, AssignmentStatusEnum, EnrollmentStatusEnum, RoleEnum
from lms.core.database import Base, get_db
from lms.crud.assessment import assessment as crud_assessment
from lms.crud.assignment import assignment as crud_assignment
from lms.crud.course import course as crud_course
from lms.crud.course_enrollment import course_enrollment as crud_enrollment
from lms.crud.user import user as crud_user
from lms.schemas.assessment import AssessmentCreate
from lms.schemas.assignment import AssignmentCreate
from lms.services.email import EmailService
from lms.services.notification import notification_dispatcher
from lms.utils import deps as deps_utils
from tests.helpers.factories import auth_headers_for, future, objective_questions

test_db_url = settings.TEST_DATABASE_URL or "sqlite://"


@pytest.fixture(scope="function")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(
            test_db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    else:
        engine = create_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_notification_log():
    notification_dispatcher.clear()
    yield
    notification_dispatcher.clear()


@pytest.fixture
def email_outbox(monkeypatch):
    """Configure SendGrid and capture every outgoing email instead of sending it."""
    outbox = []

    async def _fake_send(to_email, subject, html_content):
        outbox.append({"to": to_email, "subject": subject, "html": html_content})

    monkeypatch.setattr(settings, "SENDGRID_API_KEY", "SG.test-key")
    monkeypatch.setattr(EmailService, "_send_email_via_sendgrid", staticmethod(_fake_send))
    return outbox


@pytest.fixture
def user_factory(db_session):
    def _user_factory(role: RoleEnum = RoleEnum.STUDENT, full_name: str = None, is_active: bool = True):
        user_data = {
            "full_name": full_name or f"Test {role.value.title()}",
            "email": f"{role.value}-{uuid.uuid4().hex[:10]}@example.com",
            "role": role,
            "is_active": is_active
        }
        return crud_user.create(db_session, obj_in=user_data)
    return _user_factory


@pytest.fixture
def teacher(user_factory):
    return user_factory(RoleEnum.TEACHER, full_name="Grace Hopper")


@pytest.fixture
def other_teacher(user_factory):
    return user_factory(RoleEnum.TEACHER, full_name="Alan Turing")


@pytest.fixture
def student(user_factory):
    return user_factory(RoleEnum.STUDENT, full_name="Ada Lovelace")


@pytest.fixture
def other_student(user_factory):
    return user_factory(RoleEnum.STUDENT, full_name="Katherine Johnson")


@pytest.fixture
def teacher_headers(teacher):
    return auth_headers_for(teacher)


@pytest.fixture
def other_teacher_headers(other_teacher):
    return auth_headers_for(other_teacher)


@pytest.fixture
def student_headers(student):
    return auth_headers_for(student)


@pytest.fixture
def other_student_headers(other_student):
    return auth_headers_for(other_student)


@pytest.fixture
def course(db_session, teacher):
    return crud_course.create(
        db_session,
        obj_in={"title": "Intro to Computing", "description": "Basics", "teacher_id": teacher.id}
    )


@pytest.fixture
def enroll(db_session):
    def _enroll(student, course, status: EnrollmentStatusEnum = EnrollmentStatusEnum.ACTIVE):
        return crud_enrollment.create(
            db_session,
            obj_in={"student_id": student.id, "course_id": course.id, "status": status}
        )
    return _enroll


@pytest.fixture
def enrolled_student(student, course, enroll):
    enroll(student, course)
    return student


@pytest.fixture
def assessment_factory(db_session, teacher, course):
    def _assessment_factory(questions=None, **overrides):
        data = {
            "title": "Unit Quiz",
            "course_id": course.id,
            "type": "quiz",
            "due_date": future(),
            "status": AssessmentStatusEnum.PUBLISHED,
            "questions": questions if questions is not None else objective_questions(),
        }
        data.update(overrides)
        return crud_assessment.create_with_teacher(
            db_session, obj_in=AssessmentCreate(**data), teacher_id=teacher.id
        )
    return _assessment_factory


@pytest.fixture
def assignment_factory(db_session, teacher, course):
    def _assignment_factory(**overrides):
        data = {
            "title": "Essay: The Analytical Engine",
            "description": "Write about Babbage's design.",
            "course_id": course.id,
            "due_date": future(),
            "total_points": 100,
            "status": AssignmentStatusEnum.PUBLISHED,
        }
        data.update(overrides)
        return crud_assignment.create_with_teacher(
            db_session, obj_in=AssignmentCreate(**data), teacher_id=teacher.id
        )
    return _assignment_factory

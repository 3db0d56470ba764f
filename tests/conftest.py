"""
Shared fixtures: an in-memory SQLite database, a TestClient with the DB,
mailer and pending-store dependencies overridden, and a few users.
"""

import os

# Settings are read at import time; set the required ones before importing lms
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["EMAIL_FROM"] = "noreply@test.com"
os.environ["EMAIL_PASSWORD"] = "test-password"
os.environ["PENDING_STORE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lms.core.exceptions import EmailDeliveryFailed
from lms.core.security import create_access_token, get_password_hash
from lms.db.base import Base
from lms.db.session import get_db
from lms.main import app
from lms.models.assignment import Assignment, Option, Question
from lms.models.course import Course
from lms.models.department import Department
from lms.models.enrollment import Enrollment
from lms.models.user import Role, TeacherProfile, User
from lms.services.email_service import get_email_sender
from lms.services.pending_store import InMemoryPendingStore, get_pending_store

TEST_DATABASE_URL = "sqlite://"
TEST_PASSWORD = "secret123"

# bcrypt is slow; hash the shared password once
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingMailer:
    """Collects outgoing mail instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to_email: str, subject: str, body: str) -> None:
        if self.fail:
            raise EmailDeliveryFailed("failed to send email", details="smtp down")
        self.sent.append((to_email, subject, body))


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def pending_store():
    return InMemoryPendingStore(retention_seconds=3600)


@pytest.fixture
def client(db_session, mailer, pending_store):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: mailer
    app.dependency_overrides[get_pending_store] = lambda: pending_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _make_user(db, *, name: str, email: str, role: Role, verified: bool = True) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=TEST_PASSWORD_HASH,
        role=role,
        is_verified=verified,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db_session):
    return _make_user(db_session, name="Admin", email="admin@test.com", role=Role.ADMIN)


@pytest.fixture
def teacher(db_session):
    return _make_user(db_session, name="Teacher", email="teacher@test.com", role=Role.TEACHER)


@pytest.fixture
def other_teacher(db_session):
    return _make_user(db_session, name="Other Teacher", email="teacher2@test.com", role=Role.TEACHER)


@pytest.fixture
def student(db_session):
    return _make_user(db_session, name="Student", email="student@test.com", role=Role.STUDENT)


@pytest.fixture
def other_student(db_session):
    return _make_user(db_session, name="Other Student", email="student2@test.com", role=Role.STUDENT)


@pytest.fixture
def department(db_session):
    dept = Department(name="Computer Science", description="CS")
    db_session.add(dept)
    db_session.commit()
    db_session.refresh(dept)
    return dept


@pytest.fixture
def other_department(db_session):
    dept = Department(name="Mathematics")
    db_session.add(dept)
    db_session.commit()
    db_session.refresh(dept)
    return dept


@pytest.fixture
def teacher_profile(db_session, teacher, department):
    profile = TeacherProfile(user_id=teacher.id, department_id=department.id)
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def course(db_session, teacher, department):
    course = Course(
        teacher_id=teacher.id,
        department_id=department.id,
        title="Databases",
        code="CS101",
        credits=3,
    )
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


def make_assignment(db, course: Course, title: str = "Quiz", correct=(True,)) -> Assignment:
    """One question per entry in ``correct``; each gets a right and a wrong
    option unless the entry is False, in which case no option is correct."""
    assignment = Assignment(title=title, course_id=course.id, teacher_id=course.teacher_id)
    db.add(assignment)
    db.flush()
    for i, has_correct in enumerate(correct):
        question = Question(assignment_id=assignment.id, text=f"Question {i + 1}")
        db.add(question)
        db.flush()
        db.add(Option(question_id=question.id, text="right", is_correct=has_correct))
        db.add(Option(question_id=question.id, text="wrong", is_correct=False))
    db.commit()
    db.refresh(assignment)
    return assignment


@pytest.fixture
def assignment(db_session, course):
    return make_assignment(db_session, course, correct=(True, True))


@pytest.fixture
def enrollment(db_session, student, course):
    row = Enrollment(user_id=student.id, course_id=course.id, progress=0.0, status="active")
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


def auth_headers(user: User) -> dict:
    token = create_access_token(user.id, user.role)
    return {"Authorization": f"Bearer {token}"}

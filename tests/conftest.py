from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from attendance_tracker.container import wire_container
from attendance_tracker.core.enums import Role
from attendance_tracker.main import create_app

from .fakes import FakeClock, InMemoryAttendance, InMemorySessions, InMemoryUsers

JWT_SECRET = "test-jwt-secret-0123456789-abcdefgh"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def sessions_repo() -> InMemorySessions:
    return InMemorySessions()


@pytest.fixture
def attendance_repo(users_repo, sessions_repo) -> InMemoryAttendance:
    return InMemoryAttendance(users_repo, sessions_repo)


@pytest.fixture
def container(users_repo, sessions_repo, attendance_repo, clock):
    return wire_container(
        users_repo=users_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        jwt_secret=JWT_SECRET,
        clock=clock,
    )


@pytest.fixture
def make_user(users_repo):
    def _make(username: str, role: Role, *, password: str = "pw123456", email=None):
        user_id = users_repo.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            email=email,
        )
        return users_repo.get_by_id(user_id)

    return _make


@pytest.fixture
def teacher(make_user):
    return make_user("ms_frizzle", Role.TEACHER, email="frizzle@school.edu")


@pytest.fixture
def student(make_user):
    return make_user("arnold", Role.STUDENT, email="arnold@school.edu")


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(container):
    def _header(user) -> dict:
        token = container.tokens.issue(user_id=user.user_id, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _header

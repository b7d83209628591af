from __future__ import annotations

import pytest

from attendance_tracker.attendance.service import AttendanceService
from attendance_tracker.core.enums import Role
from attendance_tracker.core.exceptions import AlreadyMarked, InvalidOrExpiredCode, NotFound, ValidationError
from attendance_tracker.sessions.service import SessionService

from tests.fakes import RacingAttendance

HERE = {"latitude": 51.5074, "longitude": -0.1278}


@pytest.fixture
def sessions(sessions_repo, clock):
    return SessionService(sessions_repo, clock=clock)


@pytest.fixture
def service(attendance_repo, sessions, clock):
    return AttendanceService(attendance_repo, sessions, clock=clock)


def test_mark_then_duplicate_then_expired(service, sessions, teacher, student, make_user, clock, fixed_now):
    session = sessions.create_session(teacher)

    clock.advance(minutes=5)
    record = service.mark_attendance(student.user_id, session.code, HERE)

    assert record.student_id == student.user_id
    assert record.session_id == session.session_id
    assert record.timestamp == clock.now
    assert record.location.to_dict() == HERE

    with pytest.raises(AlreadyMarked):
        service.mark_attendance(student.user_id, session.code, HERE)

    latecomer = make_user("carlos", Role.STUDENT)
    clock.now = fixed_now
    clock.advance(minutes=16)
    with pytest.raises(InvalidOrExpiredCode):
        service.mark_attendance(latecomer.user_id, session.code, HERE)


def test_mark_unknown_code_raises(service, student):
    with pytest.raises(InvalidOrExpiredCode):
        service.mark_attendance(student.user_id, "999999", HERE)


def test_mark_against_teacher_expired_session_raises(service, sessions, teacher, student):
    session = sessions.create_session(teacher)
    sessions.update_status(teacher.user_id, session.session_id, "expired")

    with pytest.raises(InvalidOrExpiredCode):
        service.mark_attendance(student.user_id, session.code, HERE)


def test_mark_accepts_numeric_code(service, sessions, teacher, student):
    session = sessions.create_session(teacher)

    record = service.mark_attendance(student.user_id, int(session.code), HERE)

    assert record.session_id == session.session_id


@pytest.mark.parametrize(
    "code,location",
    [
        ("", HERE),
        (None, HERE),
        ("123456", None),
        ("123456", {"latitude": 1.0}),
        ("123456", {"latitude": "abc", "longitude": 2.0}),
        ("123456", {"latitude": True, "longitude": 2.0}),
        ("123456", [1.0, 2.0]),
    ],
)
def test_mark_rejects_malformed_input(service, student, code, location):
    with pytest.raises(ValidationError):
        service.mark_attendance(student.user_id, code, location)


def test_location_is_recorded_as_is(service, sessions, teacher, student):
    session = sessions.create_session(teacher)

    # Far away from anything; there is no geofence.
    record = service.mark_attendance(student.user_id, session.code, {"latitude": -89.9, "longitude": 179.9})

    assert record.location.coordinates == (179.9, -89.9)


def test_unique_index_closes_the_check_then_insert_race(users_repo, sessions_repo, sessions, teacher, student, clock):
    racing = RacingAttendance(users_repo, sessions_repo)
    service = AttendanceService(racing, sessions, clock=clock)
    session = sessions.create_session(teacher)

    service.mark_attendance(student.user_id, session.code, HERE)
    with pytest.raises(AlreadyMarked):
        service.mark_attendance(student.user_id, session.code, HERE)

    assert len(racing.records) == 1


def test_teacher_view_round_trips_location(service, sessions, teacher, student):
    session = sessions.create_session(teacher)
    service.mark_attendance(student.user_id, session.code, {"latitude": 12.5, "longitude": -3.25})

    rows = service.list_for_session(teacher.user_id, session.session_id)

    assert len(rows) == 1
    data = rows[0].to_dict()
    assert data["location"] == {"latitude": 12.5, "longitude": -3.25}
    assert data["student"] == {"id": student.user_id, "username": "arnold", "email": "arnold@school.edu"}


def test_teacher_view_is_newest_first_and_drops_unresolvable_students(
    service, sessions, users_repo, teacher, student, make_user, clock
):
    session = sessions.create_session(teacher)
    gone = make_user("gone", Role.STUDENT)
    colleague = make_user("mr_ruhle", Role.TEACHER)

    service.mark_attendance(student.user_id, session.code, HERE)
    clock.advance(minutes=1)
    service.mark_attendance(gone.user_id, session.code, HERE)
    clock.advance(minutes=1)
    service.mark_attendance(colleague.user_id, session.code, HERE)
    clock.advance(minutes=1)
    late = make_user("wanda", Role.STUDENT)
    service.mark_attendance(late.user_id, session.code, HERE)
    users_repo.delete(gone.user_id)

    rows = service.list_for_session(teacher.user_id, session.session_id)

    assert [r.student.username for r in rows] == ["wanda", "arnold"]


def test_teacher_view_of_foreign_session_is_not_found(service, sessions, teacher, make_user):
    other = make_user("mr_ruhle", Role.TEACHER)
    session = sessions.create_session(other)

    with pytest.raises(NotFound):
        service.list_for_session(teacher.user_id, session.session_id)


def test_history_joins_sessions_newest_first(service, sessions, teacher, student, clock):
    first = sessions.create_session(teacher)
    service.mark_attendance(student.user_id, first.code, HERE)
    clock.advance(minutes=20)
    second = sessions.create_session(teacher)
    service.mark_attendance(student.user_id, second.code, HERE)

    history = service.history(student.user_id)

    assert [h.session.session_id for h in history] == [second.session_id, first.session_id]
    assert history[0].to_dict()["session"]["code"] == second.code


def test_history_is_per_student(service, sessions, teacher, student, make_user):
    other = make_user("carlos", Role.STUDENT)
    session = sessions.create_session(teacher)
    service.mark_attendance(other.user_id, session.code, HERE)

    assert service.history(student.user_id) == []

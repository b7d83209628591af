from __future__ import annotations

from datetime import datetime

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from attendance_tracker.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from attendance_tracker.common.geo import GeoPoint
from attendance_tracker.core.enums import Role
from attendance_tracker.core.exceptions import AlreadyMarked
from attendance_tracker.database.connection import DBConfig

MARKED_AT = datetime(2026, 2, 1, 8, 3, 0, 250000)


class ScriptedCursor:
    """Records statements; answers with canned rows or raises a canned error."""

    def __init__(self, factory):
        self._factory = factory
        self.lastrowid = factory.lastrowid

    def execute(self, sql, params=None):
        self._factory.executed.append((" ".join(sql.split()), params))
        if self._factory.error is not None:
            raise self._factory.error

    def fetchone(self):
        return self._factory.rows[0] if self._factory.rows else None

    def fetchall(self):
        return list(self._factory.rows)

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, factory):
        self._factory = factory

    def cursor(self, dictionary=True):
        return ScriptedCursor(self._factory)

    def commit(self):
        self._factory.commits += 1

    def rollback(self):
        self._factory.rollbacks += 1

    def close(self):
        pass


class ScriptedFactory:
    def __init__(self, *, rows=(), error=None, lastrowid=None):
        self.config = DBConfig.from_mapping({})
        self.rows = list(rows)
        self.error = error
        self.lastrowid = lastrowid
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    def connect(self, *, with_database=True):
        return ScriptedConnection(self)


def _record_row(**overrides):
    row = {
        "record_id": 7,
        "student_id": 3,
        "session_id": 11,
        "marked_at": MARKED_AT,
        "longitude": -74.006,
        "latitude": 40.7128,
    }
    row.update(overrides)
    return row


def test_duplicate_key_on_insert_is_already_marked():
    dup = IntegrityError(msg="Duplicate entry '3-11' for key 'uq_records_student_session'", errno=errorcode.ER_DUP_ENTRY)
    factory = ScriptedFactory(error=dup)
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(AlreadyMarked):
        repo.create(student_id=3, session_id=11, timestamp=MARKED_AT, location=GeoPoint(longitude=1.0, latitude=2.0))

    assert factory.rollbacks == 1
    assert factory.commits == 0


def test_other_integrity_errors_propagate():
    fk = IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    repo = MySQLAttendanceRepository(ScriptedFactory(error=fk))

    with pytest.raises(IntegrityError):
        repo.create(student_id=3, session_id=99, timestamp=MARKED_AT, location=GeoPoint(longitude=1.0, latitude=2.0))


def test_insert_writes_point_as_longitude_then_latitude():
    factory = ScriptedFactory(lastrowid=42)
    repo = MySQLAttendanceRepository(factory)

    record = repo.create(
        student_id=3,
        session_id=11,
        timestamp=MARKED_AT,
        location=GeoPoint(longitude=-74.006, latitude=40.7128),
    )

    sql, params = factory.executed[0]
    assert "ST_GeomFromText(%s)" in sql
    assert params == (3, 11, MARKED_AT, "POINT(-74.006 40.7128)")
    assert record.record_id == 42
    assert factory.commits == 1


def test_row_maps_x_to_longitude_and_y_to_latitude():
    repo = MySQLAttendanceRepository(ScriptedFactory(rows=[_record_row()]))

    record = repo.get_for_student_and_session(student_id=3, session_id=11)

    assert record.record_id == 7
    assert record.timestamp == MARKED_AT
    assert record.location.to_dict() == {"latitude": 40.7128, "longitude": -74.006}


def test_missing_record_is_none():
    assert MySQLAttendanceRepository(ScriptedFactory()).get_for_student_and_session(student_id=3, session_id=11) is None


def test_history_keeps_records_whose_session_is_gone():
    rows = [
        _record_row(
            teacher_id=1,
            code="123456",
            status="expired",
            created_at=datetime(2026, 2, 1, 8, 0),
            expires_at=datetime(2026, 2, 1, 8, 15),
            session_longitude=None,
            session_latitude=None,
        ),
        _record_row(record_id=6, session_id=10, code=None, teacher_id=None, status=None),
    ]
    repo = MySQLAttendanceRepository(ScriptedFactory(rows=rows))

    history = repo.history_for_student(3)

    assert history[0].session.code == "123456"
    assert history[0].session.location is None
    assert history[1].session is None
    assert history[1].record.session_id == 10


def test_teacher_view_filters_on_student_role():
    rows = [_record_row(username="arnold", email=None, password_hash="x", role="student")]
    factory = ScriptedFactory(rows=rows)
    repo = MySQLAttendanceRepository(factory)

    result = repo.list_for_session(11)

    _, params = factory.executed[0]
    assert params == (Role.STUDENT.value, 11)
    assert result[0].student.username == "arnold"
    assert result[0].to_dict()["location"] == {"latitude": 40.7128, "longitude": -74.006}

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.geo import GeoPoint
from ..core.enums import Role, SessionStatus
from ..core.exceptions import AlreadyMarked
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..sessions.model import AttendanceSession
from ..users.model import User
from .model import AttendanceRecord, HistoryEntry, SessionAttendanceRow
from .repository import AttendanceRepository


def _to_record(row: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(row["record_id"]),
        student_id=int(row["student_id"]),
        session_id=int(row["session_id"]),
        timestamp=row["marked_at"],
        location=GeoPoint.from_coordinates((row["longitude"], row["latitude"])),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_session(self, *, student_id: int, session_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, student_id, session_id, marked_at,
                       ST_X(location) AS longitude, ST_Y(location) AS latitude
                FROM attendance_records
                WHERE student_id=%s AND session_id=%s
                """,
                (int(student_id), int(session_id)),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create(
        self,
        *,
        student_id: int,
        session_id: int,
        timestamp: datetime,
        location: GeoPoint,
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(student_id, session_id, marked_at, location)
                    VALUES(%s,%s,%s,ST_GeomFromText(%s))
                    """,
                    (int(student_id), int(session_id), timestamp, location.to_wkt()),
                )
                record_id = int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise AlreadyMarked("Attendance already marked for this session") from e
            raise

        return AttendanceRecord(
            record_id=record_id,
            student_id=int(student_id),
            session_id=int(session_id),
            timestamp=timestamp,
            location=location,
        )

    def history_for_student(self, student_id: int) -> Sequence[HistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    ar.record_id, ar.student_id, ar.session_id, ar.marked_at,
                    ST_X(ar.location) AS longitude, ST_Y(ar.location) AS latitude,
                    s.teacher_id, s.code, s.status, s.created_at, s.expires_at,
                    ST_X(s.location) AS session_longitude, ST_Y(s.location) AS session_latitude
                FROM attendance_records ar
                LEFT JOIN attendance_sessions s ON s.session_id = ar.session_id
                WHERE ar.student_id=%s
                ORDER BY ar.marked_at DESC, ar.record_id DESC
                """,
                (int(student_id),),
            )
            rows = fetchall(cur)

            out: list[HistoryEntry] = []
            for r in rows:
                session = None
                if r.get("code") is not None:
                    session_location = None
                    if r.get("session_longitude") is not None and r.get("session_latitude") is not None:
                        session_location = GeoPoint.from_coordinates((r["session_longitude"], r["session_latitude"]))
                    session = AttendanceSession(
                        session_id=int(r["session_id"]),
                        teacher_id=int(r["teacher_id"]),
                        code=str(r["code"]),
                        status=SessionStatus(r["status"]),
                        created_at=r["created_at"],
                        expires_at=r["expires_at"],
                        location=session_location,
                    )
                out.append(HistoryEntry(record=_to_record(r), session=session))
            return out

    def list_for_session(self, session_id: int) -> Sequence[SessionAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    ar.record_id, ar.student_id, ar.session_id, ar.marked_at,
                    ST_X(ar.location) AS longitude, ST_Y(ar.location) AS latitude,
                    u.username, u.email, u.password_hash, u.role
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.student_id AND u.role = %s
                WHERE ar.session_id=%s
                ORDER BY ar.marked_at DESC, ar.record_id DESC
                """,
                (Role.STUDENT.value, int(session_id)),
            )
            rows = fetchall(cur)
            return [
                SessionAttendanceRow(
                    record=_to_record(r),
                    student=User(
                        user_id=int(r["student_id"]),
                        username=r["username"],
                        password_hash=r["password_hash"],
                        role=Role(r["role"]),
                        email=r.get("email"),
                    ),
                )
                for r in rows
            ]

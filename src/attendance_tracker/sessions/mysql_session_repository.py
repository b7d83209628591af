from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.geo import GeoPoint
from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSession
from .repository import SessionRepository

_COLUMNS = """
    session_id, teacher_id, code, status, created_at, expires_at,
    ST_X(location) AS longitude, ST_Y(location) AS latitude
"""


def _to_session(row: Dict[str, Any]) -> AttendanceSession:
    location = None
    if row.get("longitude") is not None and row.get("latitude") is not None:
        location = GeoPoint.from_coordinates((row["longitude"], row["latitude"]))
    return AttendanceSession(
        session_id=int(row["session_id"]),
        teacher_id=int(row["teacher_id"]),
        code=str(row["code"]),
        status=SessionStatus(row["status"]),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        location=location,
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        teacher_id: int,
        code: str,
        created_at: datetime,
        expires_at: datetime,
        location: Optional[GeoPoint] = None,
    ) -> AttendanceSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(teacher_id, code, status, created_at, expires_at, location)
                VALUES(%s,%s,%s,%s,%s,ST_GeomFromText(%s))
                """,
                (
                    int(teacher_id),
                    code,
                    SessionStatus.ACTIVE.value,
                    created_at,
                    expires_at,
                    location.to_wkt() if location else None,
                ),
            )
            session_id = int(cur.lastrowid)

        return AttendanceSession(
            session_id=session_id,
            teacher_id=int(teacher_id),
            code=code,
            status=SessionStatus.ACTIVE,
            created_at=created_at,
            expires_at=expires_at,
            location=location,
        )

    def get_owned(self, *, session_id: int, teacher_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE session_id=%s AND teacher_id=%s
                """,
                (int(session_id), int(teacher_id)),
            )
            row = fetchone(cur)
            return _to_session(row) if row else None

    def list_for_teacher(self, teacher_id: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE teacher_id=%s
                ORDER BY created_at DESC, session_id DESC
                """,
                (int(teacher_id),),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_active_for_teacher(self, teacher_id: int, *, now: datetime) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE teacher_id=%s AND status=%s AND expires_at > %s
                ORDER BY created_at DESC, session_id DESC
                """,
                (int(teacher_id), SessionStatus.ACTIVE.value, now),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def find_active_by_code(self, code: str, *, now: datetime) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE code=%s AND status=%s AND expires_at > %s
                ORDER BY created_at DESC, session_id DESC
                """,
                (code, SessionStatus.ACTIVE.value, now),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def update_status(
        self,
        *,
        session_id: int,
        status: SessionStatus,
        expires_at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET status=%s, expires_at=%s
                WHERE session_id=%s
                """,
                (status.value, expires_at, int(session_id)),
            )

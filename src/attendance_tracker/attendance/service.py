from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Sequence

from ..common.datetime_utils import now_utc
from ..common.geo import GeoPoint
from ..common.validators import require_non_empty
from ..core.exceptions import AlreadyMarked, InvalidOrExpiredCode
from ..sessions.service import SessionService
from .model import AttendanceRecord, HistoryEntry, SessionAttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _normalize_code(code: Any) -> str:
    # Clients sometimes send the numeric code as a JSON number.
    if isinstance(code, int) and not isinstance(code, bool):
        code = str(code)
    return require_non_empty(code, "Session code")


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionService,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._clock = clock

    def mark_attendance(
        self,
        student_id: int,
        code: Any,
        location: Any,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        code = _normalize_code(code)
        point = GeoPoint.from_dict(location)
        now = now or self._clock()

        session = self._sessions.resolve_active_by_code(code, now=now)
        if not session:
            raise InvalidOrExpiredCode("Invalid or expired session code")

        existing = self._attendance.get_for_student_and_session(student_id=int(student_id), session_id=session.session_id)
        if existing:
            logger.warning("Student %s tried to mark session %s twice", student_id, session.session_id)
            raise AlreadyMarked("Attendance already marked for this session")

        record = self._attendance.create(
            student_id=int(student_id),
            session_id=session.session_id,
            timestamp=now,
            location=point,
        )
        logger.info("Student %s marked attendance for session %s", student_id, session.session_id)
        return record

    def history(self, student_id: int) -> Sequence[HistoryEntry]:
        return self._attendance.history_for_student(int(student_id))

    def list_for_session(self, teacher_id: int, session_id: int) -> Sequence[SessionAttendanceRow]:
        session = self._sessions.get_owned(teacher_id, session_id)
        return self._attendance.list_for_session(session.session_id)

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.geo import GeoPoint
from .model import AttendanceRecord, HistoryEntry, SessionAttendanceRow


class AttendanceRepository(Protocol):
    def get_for_student_and_session(self, *, student_id: int, session_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: int,
        session_id: int,
        timestamp: datetime,
        location: GeoPoint,
    ) -> AttendanceRecord:
        """Insert a record; raises ``AlreadyMarked`` when the pair already exists."""

        raise NotImplementedError

    def history_for_student(self, student_id: int) -> Sequence[HistoryEntry]:
        """Newest timestamp first."""

        raise NotImplementedError

    def list_for_session(self, session_id: int) -> Sequence[SessionAttendanceRow]:
        """Newest first; rows whose student does not resolve to a student are left out."""

        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.geo import GeoPoint
from ..core.enums import SessionStatus
from .model import AttendanceSession


class SessionRepository(Protocol):
    def create(
        self,
        *,
        teacher_id: int,
        code: str,
        created_at: datetime,
        expires_at: datetime,
        location: Optional[GeoPoint] = None,
    ) -> AttendanceSession:
        raise NotImplementedError

    def get_owned(self, *, session_id: int, teacher_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[AttendanceSession]:
        """Newest-created first."""

        raise NotImplementedError

    def list_active_for_teacher(self, teacher_id: int, *, now: datetime) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def find_active_by_code(self, code: str, *, now: datetime) -> Sequence[AttendanceSession]:
        """Sessions with this code, status=active and expires_at > now, newest first."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        session_id: int,
        status: SessionStatus,
        expires_at: datetime,
    ) -> None:
        raise NotImplementedError

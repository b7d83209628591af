from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..common.geo import GeoPoint
from ..core.enums import SessionStatus


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: a short-lived attendance session owned by a teacher."""

    session_id: int
    teacher_id: int
    code: str
    status: SessionStatus
    created_at: datetime
    expires_at: datetime
    location: Optional[GeoPoint] = None

    def is_active_at(self, now: datetime) -> bool:
        """Soft expiry: stored status alone is not enough."""
        return self.status == SessionStatus.ACTIVE and self.expires_at > now

    def to_dict(self) -> dict:
        return {
            "id": self.session_id,
            "teacherId": self.teacher_id,
            "code": self.code,
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
            "expiresAt": to_iso(self.expires_at),
            "location": self.location.to_dict() if self.location else None,
        }

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..common.geo import GeoPoint
from ..sessions.model import AttendanceSession
from ..users.model import User


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: proof that a student was present for a session."""

    record_id: int
    student_id: int
    session_id: int
    timestamp: datetime
    location: GeoPoint

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "studentId": self.student_id,
            "sessionId": self.session_id,
            "timestamp": to_iso(self.timestamp),
            "location": self.location.to_dict(),
        }


@dataclass(frozen=True)
class HistoryEntry:
    """Read-model: a student's record joined with its session."""

    record: AttendanceRecord
    session: Optional[AttendanceSession]

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["session"] = self.session.to_dict() if self.session else None
        return data


@dataclass(frozen=True)
class SessionAttendanceRow:
    """Read-model: a record joined with the submitting student's public profile."""

    record: AttendanceRecord
    student: User

    def to_dict(self) -> dict:
        return {
            "id": self.record.record_id,
            "sessionId": self.record.session_id,
            "student": self.student.public_profile(),
            "timestamp": to_iso(self.record.timestamp),
            "location": self.record.location.to_dict(),
        }

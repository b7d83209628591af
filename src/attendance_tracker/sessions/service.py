from __future__ import annotations

import json
import logging
import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso
from ..common.geo import GeoPoint
from ..core.constants import SESSION_CODE_MAX, SESSION_CODE_MIN, SESSION_TTL_MINUTES
from ..core.enums import SessionStatus
from ..core.exceptions import Forbidden, NotFound, ValidationError
from ..users.model import User
from .model import AttendanceSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def generate_session_code() -> str:
    """Random 6-digit decimal code (100000-999999)."""
    return str(SESSION_CODE_MIN + secrets.randbelow(SESSION_CODE_MAX - SESSION_CODE_MIN + 1))


@dataclass(frozen=True)
class QrPayload:
    payload: str
    expires_at: datetime

    def to_dict(self) -> dict:
        return {"payload": self.payload, "expiresAt": to_iso(self.expires_at)}


class SessionService:
    def __init__(
        self,
        sessions: SessionRepository,
        *,
        ttl_minutes: int = SESSION_TTL_MINUTES,
        code_generator: Callable[[], str] = generate_session_code,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._sessions = sessions
        self._ttl = timedelta(minutes=int(ttl_minutes))
        self._generate_code = code_generator
        self._clock = clock

    def create_session(self, user: User, *, location: Any = None, now: datetime | None = None) -> AttendanceSession:
        if not user.is_teacher:
            raise Forbidden("Only teachers can create sessions")

        point = GeoPoint.from_optional_dict(location)
        now = now or self._clock()
        code = self._generate_code()

        # Codes are not de-duplicated; a clash is only reported.
        if self._sessions.find_active_by_code(code, now=now):
            logger.warning("Session code %s is already held by another active session", code)

        session = self._sessions.create(
            teacher_id=user.user_id,
            code=code,
            created_at=now,
            expires_at=now + self._ttl,
            location=point,
        )
        logger.info("Teacher %s created session %s (code %s)", user.user_id, session.session_id, code)
        return session

    def list_sessions(self, teacher_id: int) -> Sequence[AttendanceSession]:
        return self._sessions.list_for_teacher(int(teacher_id))

    def list_active(self, teacher_id: int, *, now: datetime | None = None) -> Sequence[AttendanceSession]:
        return self._sessions.list_active_for_teacher(int(teacher_id), now=now or self._clock())

    def get_owned(self, teacher_id: int, session_id: int) -> AttendanceSession:
        session = self._sessions.get_owned(session_id=int(session_id), teacher_id=int(teacher_id))
        if not session:
            raise NotFound("Session not found")
        return session

    def update_status(
        self,
        teacher_id: int,
        session_id: int,
        new_status: Any,
        *,
        now: datetime | None = None,
    ) -> AttendanceSession:
        session = self.get_owned(teacher_id, session_id)

        try:
            status = SessionStatus(new_status)
        except ValueError:
            raise ValidationError("Status must be 'active' or 'expired'")

        if status == SessionStatus.ACTIVE:
            if session.status == SessionStatus.EXPIRED:
                raise ValidationError("An expired session cannot be reactivated")
            return session

        now = now or self._clock()
        self._sessions.update_status(session_id=session.session_id, status=status, expires_at=now)
        logger.info("Teacher %s expired session %s", teacher_id, session.session_id)
        return replace(session, status=status, expires_at=now)

    def resolve_active_by_code(self, code: str, *, now: datetime | None = None) -> Optional[AttendanceSession]:
        matches = self._sessions.find_active_by_code(code, now=now or self._clock())
        return matches[0] if matches else None

    def qr_payload(self, teacher_id: int, session_id: int, *, now: datetime | None = None) -> QrPayload:
        session = self.get_owned(teacher_id, session_id)
        now = now or self._clock()
        payload = json.dumps({"sessionId": session.code, "timestamp": to_iso(now)}, separators=(",", ":"))
        return QrPayload(payload=payload, expires_at=session.expires_at)

    @staticmethod
    def code_from_qr_payload(payload: Any) -> str:
        """Pull the session code back out of a scanned QR payload."""
        if not isinstance(payload, str) or not payload.strip():
            raise ValidationError("QR payload is required")
        try:
            data = json.loads(payload)
        except ValueError:
            raise ValidationError("QR payload is not valid JSON")
        if not isinstance(data, dict) or not isinstance(data.get("sessionId"), str):
            raise ValidationError("QR payload has no session code")
        return data["sessionId"]

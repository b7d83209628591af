from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    TEACHER = "teacher"
    STUDENT = "student"


class SessionStatus(str, Enum):
    """Stored status of an attendance session.

    Only ``ACTIVE -> EXPIRED`` is a legal transition.
    """

    ACTIVE = "active"
    EXPIRED = "expired"

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    email: Optional[str] = None

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    def public_profile(self) -> dict:
        return {"id": self.user_id, "username": self.username, "email": self.email}

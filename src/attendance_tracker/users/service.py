from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import DuplicateUser, InvalidCredentials, InvalidToken, ValidationError
from .model import User
from .repository import UserRepository
from .tokens import TokenCodec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """What the client keeps after login."""

    token: str
    role: Role

    def to_dict(self) -> dict:
        return {"token": self.token, "role": self.role.value}


class AuthService:
    """Use cases: register, login, validate a bearer token."""

    def __init__(self, users: UserRepository, tokens: TokenCodec):
        self._users = users
        self._tokens = tokens

    def register(self, username: Any, password: Any, role: Any, *, email: Any = None) -> int:
        username = require_non_empty(username, "Username")
        if not isinstance(password, str) or not password:
            raise ValidationError("Password is required")
        role_s = require_non_empty(role, "Role")
        try:
            role_e = Role(role_s.lower())
        except ValueError:
            raise ValidationError("Role must be 'teacher' or 'student'")

        email_s: Optional[str] = None
        if email is not None:
            if not isinstance(email, str):
                raise ValidationError("Email must be a string")
            email_s = email.strip() or None

        # The repository re-checks through the unique index.
        if self._users.get_by_username(username):
            raise DuplicateUser("Username already exists")

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=role_e,
            email=email_s,
        )
        logger.info("Registered %s user %s (id=%s)", role_e.value, username, user_id)
        return user_id

    def login(self, username: Any, password: Any) -> LoginResult:
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidCredentials("Invalid login credentials")

        user = self._users.get_by_username(username.strip())
        if not user:
            logger.warning("Login failed for unknown user %s", username)
            raise InvalidCredentials("Invalid login credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hash values
            ok = False

        if not ok:
            logger.warning("Login failed for user %s", user.username)
            raise InvalidCredentials("Invalid login credentials")

        logger.info("User %s logged in", user.username)
        return LoginResult(token=self._tokens.issue(user_id=user.user_id, role=user.role), role=user.role)

    def validate(self, token: Optional[str]) -> User:
        if not token:
            raise InvalidToken("Invalid token")
        claims = self._tokens.decode(token)
        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise InvalidToken("Invalid token")
        return user

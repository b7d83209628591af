from __future__ import annotations

from dataclasses import dataclass

import jwt

from ..core.constants import TOKEN_ALGORITHM
from ..core.enums import Role
from ..core.exceptions import InvalidToken


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role


class TokenCodec:
    """Signs and verifies bearer tokens (JWT).

    Tokens carry ``user_id`` and ``role`` and no ``exp`` claim.
    """

    def __init__(self, secret: str, *, algorithm: str = TOKEN_ALGORITHM):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, *, user_id: int, role: Role) -> str:
        return jwt.encode({"user_id": int(user_id), "role": role.value}, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError as e:
            raise InvalidToken("Invalid token") from e

        user_id = payload.get("user_id")
        role = payload.get("role")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise InvalidToken("Invalid token")
        try:
            return TokenClaims(user_id=user_id, role=Role(role))
        except ValueError as e:
            raise InvalidToken("Invalid token") from e

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, request

from ..core.exceptions import Unauthorized
from ..users.model import User
from ..users.service import AuthService


def bearer_token(header: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        raise Unauthorized("Authentication required")
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Authentication required")
    return token.strip()


def build_auth_required(auth_service: AuthService) -> Callable:
    """Decorator factory: resolve the caller before the view runs.

    Role checks are not done here; each service operation owns its predicate.
    """

    def auth_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = bearer_token(request.headers.get("Authorization"))
            g.current_user = auth_service.validate(token)
            return view(*args, **kwargs)

        return wrapper

    return auth_required


def current_user() -> User:
    user = g.get("current_user")
    if user is None:
        raise Unauthorized("Authentication required")
    return user

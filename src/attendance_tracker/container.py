from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_utc
from .core.constants import SESSION_TTL_MINUTES, TOKEN_ALGORITHM
from .database.connection import DBConfig, DatabaseConnection
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService, generate_session_code
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .users.tokens import TokenCodec


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository

    tokens: TokenCodec
    auth_service: AuthService
    session_service: SessionService
    attendance_service: AttendanceService


def wire_container(
    *,
    users_repo: UserRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    jwt_secret: str,
    jwt_algorithm: str = TOKEN_ALGORITHM,
    session_ttl_minutes: int = SESSION_TTL_MINUTES,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = now_utc,
    code_generator: Callable[[], str] = generate_session_code,
) -> Container:
    """Build services on top of any repository implementations."""

    tokens = TokenCodec(jwt_secret, algorithm=jwt_algorithm)
    auth_service = AuthService(users_repo, tokens)
    session_service = SessionService(
        sessions_repo,
        ttl_minutes=session_ttl_minutes,
        code_generator=code_generator,
        clock=clock,
    )
    attendance_service = AttendanceService(attendance_repo, session_service, clock=clock)

    return Container(
        conn=conn,
        users_repo=users_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        tokens=tokens,
        auth_service=auth_service,
        session_service=session_service,
        attendance_service=attendance_service,
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_algorithm: str = TOKEN_ALGORITHM,
    session_ttl_minutes: int = SESSION_TTL_MINUTES,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        jwt_secret=jwt_secret,
        jwt_algorithm=jwt_algorithm,
        session_ttl_minutes=session_ttl_minutes,
        conn=conn,
    )

"""Apply ``database/schema.sql`` through mysql-connector.

The connector executes one statement per ``execute`` call, so the script is
split client-side. Every statement in the schema is ``IF NOT EXISTS``; running
it again is a no-op.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List

from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

# The target database comes from DBConfig, not from the script.
_DATABASE_DIRECTIVE = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;")
_QUOTES = {"'", '"', "`"}


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def split_statements(sql: str) -> Iterator[str]:
    """Yield statements separated by ``;``, ignoring semicolons inside quotes."""
    start = 0
    quote = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\" and quote != "`":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def load_schema(schema_path: str | Path) -> List[str]:
    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _DATABASE_DIRECTIVE.sub("", _strip_line_comments(sql))
    return list(split_statements(sql))


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    with db_cursor(conn_factory, dictionary=False, with_database=False) as (_, cur):
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    statements = load_schema(schema_path)
    ensure_database_exists(conn_factory)

    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)
    logger.info("Applied %d schema statements to %s", len(statements), conn_factory.config.database)


def list_tables(conn_factory: DatabaseConnection) -> List[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]

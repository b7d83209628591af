from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Current UTC time as a naive datetime, truncated to milliseconds.

    MySQL rounds sub-millisecond digits on DATETIME(3) columns; truncating here
    keeps stored values equal to what the service returned.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Render a naive UTC datetime as ISO-8601 with a ``Z`` suffix."""
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds") + "Z"

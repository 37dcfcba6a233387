"""
CADF timestamp helpers.

``eventTime`` is ISO-8601 with an explicit offset or a trailing ``Z``. Some
producers emit nanosecond fractions, which ``datetime.fromisoformat`` rejects
before Python 3.11, so fractions are cut to microseconds first.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_event_time(value: Any) -> datetime | None:
    """Aware UTC datetime for a CADF timestamp, or None when it is not one."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None

    s = _FRACTION.sub(r"\1", value.strip())
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now_rfc3339() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="microseconds").replace("+00:00", "Z")

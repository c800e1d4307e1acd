"""
date_time_helper.py

Helpers for UTC timestamps and calendar-month arithmetic.

All floss_funding modules should use ONLY these helpers for date/time logic,
so that tests can pin "now" in one place.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime without microseconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string (YYYY-MM-DDTHH:MM:SS+00:00).
    Used for lockfile timestamps.
    """
    return to_utc_iso(utc_now())


def to_utc_iso(dt: datetime) -> str:
    """Normalize *dt* to UTC and format it as ISO8601 (naive values are taken as UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat()


def parse_utc_iso(value: object) -> Optional[datetime]:
    """
    Parse an ISO8601 timestamp into an aware UTC datetime.

    YAML may already have turned the value into a datetime; both forms are
    accepted. Returns None for anything unparseable.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def month_index(year: int, month: int) -> int:
    """Months elapsed since year 0; consecutive calendar months differ by one."""
    return year * 12 + (month - 1)


def month_index_of(dt: datetime) -> int:
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return month_index(dt.year, dt.month)

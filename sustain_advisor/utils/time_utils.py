"""
Time helpers for session bookkeeping.

All timestamps in the package are timezone-aware UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def is_expired(last_seen: datetime, ttl_seconds: float, now: datetime) -> bool:
    """Return True if more than ``ttl_seconds`` have passed since ``last_seen``.

    A non-positive ``ttl_seconds`` disables expiry.

    Args:
        last_seen:   Reference timestamp (UTC).
        ttl_seconds: Time-to-live in seconds.
        now:         Current time (UTC).
    """
    if ttl_seconds <= 0:
        return False
    return now - last_seen > timedelta(seconds=ttl_seconds)

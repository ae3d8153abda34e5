"""
Date/time helpers: framework-agnostic.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime.

    MongoDB hands back naive datetimes unless the client is created with
    ``tz_aware=True``; naive values are assumed to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_expired(expires_at: datetime, now: datetime) -> bool:
    """A deadline is valid only strictly before it, so equality means expired."""
    return ensure_utc(expires_at) <= ensure_utc(now)

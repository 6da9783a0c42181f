"""
Clock helpers.

Time is injected, never read implicitly by the core: every
time-sensitive operation takes an optional ``now`` and falls back to
``utc_now`` only when the caller gave no usable instant.
"""

from datetime import datetime, timezone
from typing import Any, Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timestamp(now: Any = None, clock: Clock = utc_now) -> datetime:
    """
    Pick the instant for a new record.

    Anything that is not a datetime (None included) means "use the clock".
    """
    if isinstance(now, datetime):
        return ensure_utc(now)
    return ensure_utc(clock())


def format_timestamp(value: datetime) -> str:
    """Render as ISO-8601 UTC with milliseconds, e.g. 2024-01-01T12:00:00.000Z"""
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"

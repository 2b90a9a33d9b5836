"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Object stores disagree on whether LastModified carries a zone; normalize
    at the backend boundary.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso_z(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision and ``Z``.

    ``2024-05-01T12:00:00.000Z``, the shape browsers produce with
    ``Date.toISOString()``.
    """
    utc = ensure_utc(dt)
    assert utc is not None
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into a UTC datetime."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    result = ensure_utc(parsed)
    assert result is not None
    return result

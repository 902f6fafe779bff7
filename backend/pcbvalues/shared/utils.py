"""Shared utility functions used across components."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def isoformat_z(dt: datetime) -> str:
    """ISO-8601 with a trailing Z, the form browsers produce for UTC dates."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_bool(value: str | bool | None) -> bool:
    """Query-string boolean: absent is False, "false" is False, anything else True."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return value.strip().lower() != "false"

# src/quorum_stage/db/time.py
"""Time utilities for database models and ranking windows."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def days_ago(days: int) -> datetime:
    """Return the UTC instant ``days`` days before now."""
    return utcnow() - timedelta(days=days)


def naive_utc(value: datetime) -> datetime:
    """Drop the timezone from a UTC instant; SQLite hands back naive values."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)

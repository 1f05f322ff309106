"""Time utilities for database models and partition keys."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def local_now() -> datetime:
    """Return the current time on this process's local clock.

    Day keys are cut from the poster's wall clock, not from UTC.
    """
    return datetime.now().astimezone()


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to datetimes that lost their zone on a round trip through SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value

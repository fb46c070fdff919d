"""Utilities for datetime handling."""

from datetime import UTC, datetime

# Sortable timestamp format used for createdAt/updatedAt, e.g. "2024-05-01_13:07:42"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H:%M:%S"


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def now_timestamp() -> str:
    """Get current UTC time in the stored timestamp format."""
    return to_timestamp(now_utc())


def to_timestamp(dt: datetime) -> str:
    """Format datetime as a sortable timestamp string."""
    return dt.strftime(TIMESTAMP_FORMAT)


def from_timestamp(value: str) -> datetime:
    """Parse a stored timestamp string to a UTC datetime."""
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=UTC)

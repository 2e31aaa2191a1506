"""Small helpers shared across services."""

from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    """Generate an opaque string primary key."""
    return str(uuid4())


def utc_now() -> datetime:
    """Current time, timezone-aware in UTC."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to aware UTC.

    Naive values are treated as UTC; some drivers hand back naive datetimes
    even for ``timestamptz`` columns.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)

"""UTC datetime utilities. All timestamps are stored naive UTC."""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to naive UTC. Naive inputs are assumed to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

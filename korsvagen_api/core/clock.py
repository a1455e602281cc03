# korsvagen_api/core/clock.py
from datetime import datetime, timezone
from typing import Callable

# Timestamps are stored as naive UTC in the database
Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)

"""Timestamp helpers. The ledger stores timezone-aware UTC datetimes only."""
from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite, hand-written seed data) as UTC; shift aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def range_start(value: date | datetime) -> datetime:
    """A bare date starts at midnight of that day."""
    if isinstance(value, datetime):
        return ensure_aware(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def range_end(value: date | datetime) -> datetime:
    """A bare date covers the whole day, so the range stays inclusive."""
    if isinstance(value, datetime):
        return ensure_aware(value)
    return datetime.combine(value, time.max, tzinfo=timezone.utc)

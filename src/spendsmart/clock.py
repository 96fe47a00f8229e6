"""Time helpers; persisted timestamps are naive UTC."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return the current instant as a naive UTC datetime."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utcnow().date()


def as_naive_utc(value: datetime) -> datetime:
    """Convert aware datetimes to naive UTC; naive values are assumed UTC already."""

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

"""Calendar month windows used for spend tracking."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from ..clock import as_naive_utc
from ..logging_config import get_logger

logger = get_logger("periods")

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
MIN_YEAR = 2000
MAX_YEAR = 2100

Anchor = Union[datetime, str, None]


@dataclass(frozen=True, slots=True)
class PeriodWindow:
    """Half-open interval ``[start, end)`` of naive UTC datetimes."""

    start: datetime
    end: datetime

    def __contains__(self, value: datetime) -> bool:
        return self.start <= value < self.end


def parse_month(month: str) -> tuple[int, int]:
    """Split ``YYYY-MM`` into integers without range checks."""

    match = _MONTH_RE.match(month or "")
    if not match:
        raise ValueError("Month must use the YYYY-MM format.")
    return int(match.group(1)), int(match.group(2))


def validate_month(month: str) -> tuple[int, int]:
    """Parse ``month`` and enforce the supported year and month ranges."""

    year, month_number = parse_month(month)
    if not MIN_YEAR <= year <= MAX_YEAR or not 1 <= month_number <= 12:
        raise ValueError("Month is out of range.")
    return year, month_number


def month_key(value: datetime) -> str:
    return value.strftime("%Y-%m")


def _month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def _coerce_anchor(anchor: Anchor) -> Optional[datetime]:
    if anchor is None or anchor == "":
        return None
    try:
        if isinstance(anchor, datetime):
            return as_naive_utc(anchor)
        if isinstance(anchor, str):
            return as_naive_utc(datetime.fromisoformat(anchor.strip().replace("Z", "+00:00")))
        raise TypeError(f"unsupported anchor type {type(anchor).__name__}")
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring unparseable period anchor %r: %s", anchor, exc)
        return None


def month_window(month: str, anchor: Anchor = None) -> PeriodWindow:
    """Return the spend window for ``month``.

    The window covers the calendar month. When ``anchor`` (usually a budget's
    creation time) falls inside it, the window starts at that exact instant.
    ``month`` is assumed valid; malformed anchors are logged and ignored.
    """

    start, end = _month_bounds(*parse_month(month))
    created = _coerce_anchor(anchor)
    if created is not None and start <= created < end:
        start = created
    return PeriodWindow(start=start, end=end)


def next_month(month: str) -> str:
    year, month_number = parse_month(month)
    _, end = _month_bounds(year, month_number)
    return month_key(end)

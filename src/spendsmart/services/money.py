"""Decimal helpers for monetary fields.

Amounts travel through the services as :class:`~decimal.Decimal` and are
converted to floats exactly once, when a response payload is built.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0")
# Largest value a Numeric(12, 2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")


def to_decimal(value: Number) -> Decimal:
    """Coerce ``value`` to Decimal, raising ``ValueError`` for non-numeric input."""

    if isinstance(value, bool):
        raise ValueError("Booleans are not amounts.")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() keeps floats like 0.1 from dragging their binary expansion along
            result = Decimal(str(value).strip())
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def quantize(value: Number) -> Decimal:
    """Round to cents using half-up rounding."""

    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Amount out of range: {value!r}") from exc


def sum_amounts(values: Iterable[Number]) -> Decimal:
    """Exact decimal sum; empty input yields zero."""

    total = ZERO
    for value in values:
        total += to_decimal(value)
    return total


def to_number(value: Number | None) -> float:
    """Convert to a display float at the response boundary."""

    if value is None:
        return 0.0
    return float(to_decimal(value))

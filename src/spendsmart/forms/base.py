"""Shared parsing helpers for the dataclass forms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar, Iterable, Optional

from ..clock import as_naive_utc
from ..errors import ValidationError
from ..services import money


@dataclass(slots=True)
class BaseForm:
    """Collects raw request values and per-field error messages."""

    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    FIELDS: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None):
        """Create a form populated from request data."""

        form = cls()
        form.load(data or {})
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data; strings are stripped, other values kept as-is."""

        self.raw_data = {}
        for key in self.FIELDS:
            value = data.get(key)
            if isinstance(value, str):
                value = value.strip()
            self.raw_data[key] = value

    def provided(self, key: str) -> bool:
        value = self.raw_data.get(key)
        return value is not None and value != ""

    def validate(self) -> bool:  # pragma: no cover - overridden
        raise NotImplementedError

    def validate_or_raise(self) -> None:
        if not self.validate():
            raise ValidationError(self.errors)

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)

    def _parse_amount(self, field_name: str, *, minimum: Decimal) -> Optional[Decimal]:
        value = self.raw_data.get(field_name)
        if value is None or value == "":
            self._add_error(field_name, "This field is required.")
            return None
        try:
            amount = money.to_decimal(value)
        except ValueError:
            self._add_error(field_name, "Enter a valid number.")
            return None
        if amount < minimum:
            if minimum > 0:
                self._add_error(field_name, f"Amount must be at least {minimum}.")
            else:
                self._add_error(field_name, "Amount cannot be negative.")
            return None
        # checked before rounding: quantizing 1e30 to cents overflows the context
        if amount > money.MAX_AMOUNT or money.quantize(amount) > money.MAX_AMOUNT:
            self._add_error(field_name, f"Amount must be at most {money.MAX_AMOUNT}.")
            return None
        return money.quantize(amount)

    def _parse_datetime(self, field_name: str, *, required: bool = True) -> Optional[datetime]:
        value = self.raw_data.get(field_name)
        if value is None or value == "":
            if required:
                self._add_error(field_name, "Date is required.")
            return None
        if isinstance(value, datetime):
            return as_naive_utc(value)
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        try:
            text = str(value)
            if len(text) == 10:
                return datetime.strptime(text, "%Y-%m-%d")
            return as_naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            self._add_error(field_name, "Enter a valid date (YYYY-MM-DD).")
            return None

    def _parse_date(self, field_name: str, *, required: bool = True) -> Optional[date]:
        parsed = self._parse_datetime(field_name, required=required)
        return parsed.date() if parsed is not None else None

    def _parse_id(self, field_name: str, *, required: bool) -> Optional[int]:
        value = self.raw_data.get(field_name)
        if value is None or value == "":
            if required:
                self._add_error(field_name, "This field is required.")
            return None
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            self._add_error(field_name, "Must be a whole number.")
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            self._add_error(field_name, "Must be a whole number.")
            return None
        if parsed <= 0:
            self._add_error(field_name, "Must be greater than zero.")
            return None
        return parsed

    def _parse_text(self, field_name: str, *, max_length: int) -> str:
        value = self.raw_data.get(field_name)
        text = "" if value is None else str(value).strip()
        if len(text) > max_length:
            self._add_error(field_name, f"Must be {max_length} characters or fewer.")
        return text

    @property
    def error_messages(self) -> Iterable[str]:
        """Flattened iterable of error strings for summaries."""

        for messages in self.errors.values():
            yield from messages

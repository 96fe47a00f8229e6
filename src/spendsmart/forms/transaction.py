"""Transaction form validation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..clock import utcnow
from ..models.category import CATEGORY_TYPES
from .base import BaseForm

MIN_AMOUNT = Decimal("0.01")


def _parse_type(form: BaseForm, *, required: bool) -> Optional[str]:
    value = form.raw_data.get("type")
    if value is None or value == "":
        if required:
            form._add_error("type", "Type is required.")
        return None
    text = str(value).lower()
    if text not in CATEGORY_TYPES:
        form._add_error("type", "Type must be income or expense.")
        return None
    return text


@dataclass(slots=True)
class TransactionForm(BaseForm):
    """Represents transaction input prior to validation."""

    FIELDS = ("type", "amount", "date", "category_id", "description")

    type: Optional[str] = None
    amount: Optional[Decimal] = None
    occurred_at: Optional[datetime] = None
    category_id: Optional[int] = None
    description: str = ""

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()

        self.type = _parse_type(self, required=True)
        self.amount = self._parse_amount("amount", minimum=MIN_AMOUNT)

        self.occurred_at = self._parse_datetime("date")
        if self.occurred_at is not None and self.occurred_at > utcnow():
            self._add_error("date", "Date cannot be in the future.")

        self.category_id = self._parse_id("category_id", required=False)
        self.description = self._parse_text("description", max_length=250)

        return not self.errors


@dataclass(slots=True)
class TransactionFilterForm(BaseForm):
    """Optional filters for transaction listings."""

    FIELDS = ("type", "category_id", "start_date", "end_date")

    type: Optional[str] = None
    category_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def validate(self) -> bool:
        self.errors.clear()

        self.type = _parse_type(self, required=False)
        self.category_id = self._parse_id("category_id", required=False)
        self.start = self._parse_datetime("start_date", required=False)
        self.end = self._parse_datetime("end_date", required=False)
        if self.end is not None and len(str(self.raw_data.get("end_date"))) == 10:
            # A bare end date covers the whole day.
            self.end = self.end.replace(hour=23, minute=59, second=59, microsecond=999999)
        if self.start and self.end and self.start > self.end:
            self._add_error("end_date", "End date must not be before the start date.")

        return not self.errors

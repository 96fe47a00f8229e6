"""Budget form validation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..services.periods import validate_month
from .base import BaseForm

MIN_LIMIT = Decimal("0.01")


@dataclass(slots=True)
class BudgetForm(BaseForm):
    """Create/upsert input: category, month, limit and alert threshold."""

    FIELDS = ("category_id", "month", "limit", "threshold")

    category_id: Optional[int] = None
    month: str = ""
    limit: Optional[Decimal] = None
    threshold: Optional[float] = None

    def validate(self) -> bool:
        self.errors.clear()

        self.category_id = self._parse_id("category_id", required=True)

        month_raw = self.raw_data.get("month")
        self.month = "" if month_raw is None else str(month_raw)
        if not self.month:
            self._add_error("month", "Month is required.")
        else:
            try:
                validate_month(self.month)
            except ValueError as exc:
                self._add_error("month", str(exc))

        self.limit = self._parse_amount("limit", minimum=MIN_LIMIT)

        self.threshold = None
        threshold_raw = self.raw_data.get("threshold")
        if threshold_raw is None or threshold_raw == "":
            self._add_error("threshold", "Threshold is required.")
        else:
            try:
                if isinstance(threshold_raw, bool):
                    raise ValueError
                parsed = float(threshold_raw)
            except (TypeError, ValueError):
                self._add_error("threshold", "Threshold must be a number.")
            else:
                if not 0 <= parsed <= 100:
                    self._add_error("threshold", "Threshold must be between 0 and 100.")
                else:
                    self.threshold = parsed

        return not self.errors

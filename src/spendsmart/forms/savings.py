"""Savings goal form validation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..clock import today
from .base import BaseForm

MIN_TARGET = Decimal("0.01")
_NAME_RE = re.compile(r"^[\w\s'-]+$", re.UNICODE)


@dataclass(slots=True)
class SavingsGoalForm(BaseForm):
    """Goal input. ``partial`` validates only the fields that were supplied."""

    FIELDS = ("name", "description", "target_amount", "due_date")

    name: Optional[str] = None
    description: Optional[str] = None
    target_amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    partial: bool = False

    def validate(self) -> bool:
        self.errors.clear()

        if not self.partial or self.provided("name"):
            self.name = self._validate_name()
        if not self.partial or self.raw_data.get("description") is not None:
            self.description = self._parse_text("description", max_length=250)
        if not self.partial or self.provided("target_amount"):
            self.target_amount = self._parse_amount("target_amount", minimum=MIN_TARGET)
        if not self.partial or self.provided("due_date"):
            self.due_date = self._parse_date("due_date")
            if self.due_date is not None and self.due_date <= today():
                self._add_error("due_date", "Due date must be in the future.")

        return not self.errors

    def _validate_name(self) -> Optional[str]:
        name = self._parse_text("name", max_length=60)
        if not name:
            self._add_error("name", "Name is required.")
            return None
        if len(name) < 3:
            self._add_error("name", "Name must be at least 3 characters.")
        elif not _NAME_RE.match(name):
            self._add_error("name", "Name contains invalid characters.")
        return name


@dataclass(slots=True)
class AddMoneyForm(BaseForm):
    FIELDS = ("amount",)

    amount: Optional[Decimal] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.amount = self._parse_amount("amount", minimum=Decimal("0.01"))
        return not self.errors

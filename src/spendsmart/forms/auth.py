"""Account input: registration, login, password changes and profile edits."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..clock import today
from .base import BaseForm

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^\+?[0-9][0-9 ()-]{5,18}[0-9]$")
_CODE_RE = re.compile(r"^\d{6}$")

MIN_PASSWORD = 8
MAX_PASSWORD = 128


@dataclass(slots=True)
class _AccountForm(BaseForm):
    """Field parsers shared by the account forms."""

    def _parse_email(self, field_name: str = "email") -> str:
        email = self._parse_text(field_name, max_length=120).lower()
        if not _EMAIL_RE.match(email):
            self._add_error(field_name, "Enter a valid email address.")
        return email

    def _parse_password(self, field_name: str) -> str:
        """Raw password text; never stripped, length checked."""

        value = self.raw_data.get(field_name)
        password = "" if value is None else str(value)
        if len(password) < MIN_PASSWORD:
            self._add_error(field_name, f"Password must be at least {MIN_PASSWORD} characters.")
        elif len(password) > MAX_PASSWORD:
            self._add_error(field_name, f"Password must be {MAX_PASSWORD} characters or fewer.")
        return password

    def _parse_full_name(self) -> str:
        full_name = self._parse_text("full_name", max_length=60)
        if len(full_name) < 3:
            self._add_error("full_name", "Name must be at least 3 characters.")
        return full_name


@dataclass(slots=True)
class RegistrationForm(_AccountForm):
    FIELDS = ("email", "full_name", "password")

    email: str = ""
    full_name: str = ""
    password: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        self.email = self._parse_email()
        self.full_name = self._parse_full_name()
        self.password = self._parse_password("password")
        return not self.errors


@dataclass(slots=True)
class LoginForm(BaseForm):
    FIELDS = ("email", "password")

    email: str = ""
    password: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        self.email = self._parse_text("email", max_length=120).lower()
        password = self.raw_data.get("password")
        self.password = "" if password is None else str(password)
        if not self.email:
            self._add_error("email", "Email is required.")
        if not self.password:
            self._add_error("password", "Password is required.")
        return not self.errors


@dataclass(slots=True)
class ChangePasswordForm(_AccountForm):
    FIELDS = ("current_password", "new_password")

    current_password: str = ""
    new_password: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        current = self.raw_data.get("current_password")
        self.current_password = "" if current is None else str(current)
        if not self.current_password:
            self._add_error("current_password", "Current password is required.")
        self.new_password = self._parse_password("new_password")
        return not self.errors


@dataclass(slots=True)
class ForgotPasswordForm(_AccountForm):
    FIELDS = ("email",)

    email: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        self.email = self._parse_email()
        return not self.errors


@dataclass(slots=True)
class ResetPasswordForm(_AccountForm):
    FIELDS = ("email", "code", "password")

    email: str = ""
    code: str = ""
    password: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        self.email = self._parse_email()
        self.code = self._parse_text("code", max_length=6)
        if not _CODE_RE.match(self.code):
            self._add_error("code", "Enter the 6-digit code from the email.")
        self.password = self._parse_password("password")
        return not self.errors


@dataclass(slots=True)
class ProfileForm(_AccountForm):
    """Partial profile update: only keys present in the payload are applied.

    ``birthdate`` set to ``null`` or ``""`` clears it; the other optional
    fields clear on an empty string.
    """

    FIELDS = ("full_name", "phone_number", "country", "birthdate", "bio")

    supplied: frozenset = field(default=frozenset(), init=False)
    changes: dict[str, Any] = field(default_factory=dict, init=False)

    def load(self, data: Mapping[str, Any]) -> None:
        BaseForm.load(self, data)
        self.supplied = frozenset(key for key in self.FIELDS if key in data)

    def validate(self) -> bool:
        self.errors.clear()
        self.changes = {}

        if "full_name" in self.supplied:
            self.changes["full_name"] = self._parse_full_name()
        if "phone_number" in self.supplied:
            phone = self._parse_text("phone_number", max_length=20)
            if phone and not _PHONE_RE.match(phone):
                self._add_error("phone_number", "Enter a valid phone number.")
            self.changes["phone_number"] = phone or None
        if "country" in self.supplied:
            self.changes["country"] = self._parse_text("country", max_length=60) or None
        if "bio" in self.supplied:
            self.changes["bio"] = self._parse_text("bio", max_length=250) or None
        if "birthdate" in self.supplied:
            self.changes["birthdate"] = self._validate_birthdate()

        return not self.errors

    def _validate_birthdate(self) -> Optional[date]:
        if not self.provided("birthdate"):
            return None
        birthdate = self._parse_date("birthdate")
        if birthdate is not None and birthdate > today():
            self._add_error("birthdate", "Birthdate cannot be in the future.")
        return birthdate

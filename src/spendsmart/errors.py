"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

from typing import Mapping, Sequence


class SpendSmartError(Exception):
    """Base class for errors that map to a client-facing status code."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(SpendSmartError):
    """Malformed input; carries field level messages."""

    status_code = 400
    default_message = "Invalid data"

    def __init__(
        self,
        errors: Mapping[str, Sequence[str]] | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = {field: list(messages) for field, messages in (errors or {}).items()}

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFoundError(SpendSmartError):
    status_code = 404
    default_message = "Not found"


class ConflictError(SpendSmartError):
    status_code = 409
    default_message = "Conflict"


class DataIntegrityError(SpendSmartError):
    """Stored data references something that no longer resolves."""

    status_code = 400
    default_message = "Invalid category reference"


class AuthenticationError(SpendSmartError):
    status_code = 401
    default_message = "Invalid or expired token"


class MailDeliveryError(SpendSmartError):
    """Raised by the mail transport; always recovered by the notifier."""

    default_message = "Mail delivery failed"

"""Account registration, credential checks, password recovery and bearer tokens."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import timedelta, timezone
from html import escape
from typing import Any, Mapping, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from ..clock import utcnow
from ..config import BaseConfig
from ..domain.repositories import UserRepository
from ..errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..forms.auth import (
    ChangePasswordForm,
    ForgotPasswordForm,
    LoginForm,
    ProfileForm,
    RegistrationForm,
    ResetPasswordForm,
)
from ..logging_config import get_logger
from ..models.user import User
from .mailer import MailContent, MailTransport

logger = get_logger("auth")

_hasher = PasswordHasher()
TOKEN_ALGORITHM = "HS256"
ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller as carried by a bearer token."""

    id: int
    email: str


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def generate_reset_code() -> str:
    return str(100000 + secrets.randbelow(900000))


def render_reset_code(code: str, ttl_minutes: int) -> MailContent:
    subject = "Password recovery"
    text = (
        f"To reset your password, enter the following code: {code}\n"
        f"The code expires in {ttl_minutes} minutes."
    )
    html = (
        "<p>To reset your password, enter the following code:</p>"
        f"<p><strong>{escape(code)}</strong></p>"
        f"<p>The code expires in {ttl_minutes} minutes.</p>"
    )
    return MailContent(subject=subject, text=text, html=html)


class TokenIssuer:
    """Signs and verifies HS256 tokens with the configured secret and lifetimes.

    Access tokens authorize API calls; refresh tokens only mint new access
    tokens. The ``typ`` claim keeps one from being accepted as the other.
    """

    def __init__(self, config: BaseConfig) -> None:
        self.secret = config.SECRET_KEY
        self.ttl = timedelta(minutes=config.TOKEN_TTL_MINUTES)
        self.refresh_ttl = timedelta(days=config.REFRESH_TOKEN_TTL_DAYS)

    def issue(self, user: User) -> str:
        return self._encode(user, ACCESS, self.ttl)

    def issue_refresh(self, user: User) -> str:
        return self._encode(user, REFRESH, self.refresh_ttl)

    def _encode(self, user: User, kind: str, ttl: timedelta) -> str:
        issued = utcnow().replace(tzinfo=timezone.utc)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "typ": kind,
            "iat": issued,
            "exp": issued + ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=TOKEN_ALGORITHM)

    def decode(self, token: str, *, kind: str = ACCESS) -> Identity:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[TOKEN_ALGORITHM])
            if payload.get("typ") != kind:
                raise AuthenticationError("Invalid or expired token")
            return Identity(id=int(payload["sub"]), email=str(payload["email"]))
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired") from exc
        except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
            raise AuthenticationError("Invalid or expired token") from exc


class AuthService:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenIssuer,
        mailer: Optional[MailTransport] = None,
        reset_code_ttl_minutes: int = 60,
    ) -> None:
        self.users = users
        self.tokens = tokens
        self.mailer = mailer
        self.reset_code_ttl = timedelta(minutes=reset_code_ttl_minutes)

    def register(self, data: Mapping[str, Any]) -> User:
        form = RegistrationForm.from_mapping(data)
        form.validate_or_raise()
        if self.users.get_by_email(form.email) is not None:
            raise ConflictError("Email is already registered")

        user = self.users.create(
            User(
                email=form.email,
                full_name=form.full_name,
                password_hash=hash_password(form.password),
            )
        )
        logger.info("User registered", extra={"user_id": user.id})
        return user

    def login(self, data: Mapping[str, Any]) -> tuple[User, str]:
        """Return the user and a fresh access token; any mismatch is a 401."""

        form = LoginForm.from_mapping(data)
        form.validate_or_raise()
        user = self.users.get_by_email(form.email)
        if user is None or not verify_password(user.password_hash, form.password):
            logger.warning("Failed login attempt", extra={"email": form.email})
            raise AuthenticationError("Invalid email or password")

        user.last_login = utcnow()
        user = self.users.update(user)
        return user, self.tokens.issue(user)

    def refresh(self, refresh_token: Optional[str]) -> tuple[User, str, str]:
        """Trade a refresh token for a new access token and a rotated refresh token."""

        if not refresh_token:
            raise AuthenticationError("Refresh token required")
        identity = self.tokens.decode(refresh_token, kind=REFRESH)
        user = self.users.get_by_id(identity.id)
        if user is None:
            raise AuthenticationError("Invalid refresh token")
        return user, self.tokens.issue(user), self.tokens.issue_refresh(user)

    def get_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_preferences(self, user_id: int, data: Mapping[str, Any]) -> User:
        """Switch budget alert emails on or off."""

        user = self.get_user(user_id)
        if "alerts_enabled" in data:
            value = data["alerts_enabled"]
            if not isinstance(value, bool):
                raise ValidationError({"alerts_enabled": ["Must be true or false."]})
            user.alerts_enabled = value
        return self.users.update(user)

    def update_profile(self, user_id: int, data: Mapping[str, Any]) -> User:
        form = ProfileForm.from_mapping(data)
        form.validate_or_raise()
        user = self.get_user(user_id)
        for name, value in form.changes.items():
            setattr(user, name, value)
        user = self.users.update(user)
        logger.info("Profile updated", extra={"user_id": user_id, "fields": sorted(form.changes)})
        return user

    def change_password(self, user_id: int, data: Mapping[str, Any]) -> User:
        """Replace the password after checking the current one.

        The new password may not match the current password or any earlier one.
        """

        form = ChangePasswordForm.from_mapping(data)
        form.validate_or_raise()
        user = self.get_user(user_id)
        if not verify_password(user.password_hash, form.current_password):
            raise AuthenticationError("Current password is incorrect")
        self._reject_reused_password(user, form.new_password)

        user = self.users.replace_password(user, hash_password(form.new_password))
        logger.info("Password changed", extra={"user_id": user_id})
        return user

    def forgot_password(self, data: Mapping[str, Any]) -> None:
        """Email a one-time 6-digit code that resets the password."""

        if self.mailer is None:
            raise RuntimeError("No mail transport configured for password recovery")
        form = ForgotPasswordForm.from_mapping(data)
        form.validate_or_raise()
        user = self.users.get_by_email(form.email)
        if user is None:
            logger.warning("Password recovery for unknown email", extra={"email": form.email})
            raise NotFoundError("No user is registered with that email")

        code = generate_reset_code()
        user.reset_code_hash = hash_password(code)
        user.reset_code_expires = utcnow() + self.reset_code_ttl
        user = self.users.update(user)

        message = render_reset_code(code, int(self.reset_code_ttl.total_seconds() // 60))
        self.mailer.send(user.email, message.subject, message.text, message.html)
        logger.info("Password recovery code sent", extra={"user_id": user.id})

    def reset_password(self, data: Mapping[str, Any]) -> User:
        form = ResetPasswordForm.from_mapping(data)
        form.validate_or_raise()
        user = self.users.get_by_email(form.email)
        if (
            user is None
            or user.reset_code_hash is None
            or user.reset_code_expires is None
            or user.reset_code_expires <= utcnow()
            or not verify_password(user.reset_code_hash, form.code)
        ):
            raise ValidationError({"code": ["Invalid or expired code."]}, "Invalid or expired code")
        self._reject_reused_password(user, form.password)

        user = self.users.replace_password(user, hash_password(form.password))
        logger.info("Password reset with recovery code", extra={"user_id": user.id})
        return user

    def resolve(self, token: str) -> Identity:
        return self.tokens.decode(token)

    def _reject_reused_password(self, user: User, password: str) -> None:
        previous = [user.password_hash, *self.users.password_history(user.id)]
        if any(verify_password(hashed, password) for hashed in previous):
            raise ConflictError("You cannot reuse a previous password")


def serialize_user(user: User) -> dict[str, Any]:
    return {
        "_id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "phone_number": user.phone_number,
        "country": user.country,
        "birthdate": user.birthdate.isoformat() if user.birthdate else None,
        "bio": user.bio,
        "alerts_enabled": user.alerts_enabled,
        "createdAt": user.created_at.isoformat(),
    }

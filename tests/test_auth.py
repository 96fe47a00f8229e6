"""Registration, login, password management and bearer tokens."""

from __future__ import annotations

import re
from datetime import date, timedelta

import jwt
import pytest

from spendsmart.clock import utcnow
from spendsmart.config import TestConfig
from spendsmart.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from spendsmart.services.auth import AuthService, TokenIssuer, verify_password


@pytest.fixture
def config(monkeypatch):
    monkeypatch.setenv("SPENDSMART_SECRET_KEY", "unit-test-secret-key-0123456789abcdef")
    return TestConfig()


@pytest.fixture
def auth(user_repo, config, fake_mailer):
    return AuthService(users=user_repo, tokens=TokenIssuer(config), mailer=fake_mailer)


def test_register_hashes_password_and_normalizes_email(auth):
    user = auth.register({"email": " Ana@Example.com ", "full_name": "Ana Tester", "password": "s3cret-pass"})

    assert user.email == "ana@example.com"
    assert user.password_hash != "s3cret-pass"
    assert verify_password(user.password_hash, "s3cret-pass")


def test_register_rejects_duplicate_email(auth):
    payload = {"email": "ana@example.com", "full_name": "Ana Tester", "password": "s3cret-pass"}
    auth.register(payload)

    with pytest.raises(ConflictError):
        auth.register(payload)


def test_register_requires_long_password(auth):
    with pytest.raises(ValidationError) as excinfo:
        auth.register({"email": "ana@example.com", "full_name": "Ana", "password": "short"})

    assert "password" in excinfo.value.errors


def test_login_returns_token_resolving_to_identity(auth):
    user = auth.register({"email": "ana@example.com", "full_name": "Ana Tester", "password": "s3cret-pass"})

    logged_in, token = auth.login({"email": "ana@example.com", "password": "s3cret-pass"})
    identity = auth.resolve(token)

    assert logged_in.last_login is not None
    assert identity.id == user.id
    assert identity.email == "ana@example.com"


def test_login_with_wrong_password_is_unauthorized(auth):
    auth.register({"email": "ana@example.com", "full_name": "Ana Tester", "password": "s3cret-pass"})

    with pytest.raises(AuthenticationError):
        auth.login({"email": "ana@example.com", "password": "wrong-pass"})
    with pytest.raises(AuthenticationError):
        auth.login({"email": "nobody@example.com", "password": "s3cret-pass"})


def test_expired_and_tampered_tokens_are_rejected(auth, config):
    expired = jwt.encode(
        {"sub": "1", "email": "ana@example.com", "exp": utcnow() - timedelta(minutes=1)},
        config.SECRET_KEY,
        algorithm="HS256",
    )
    forged = jwt.encode(
        {"sub": "1", "email": "ana@example.com"}, "another-secret-key-0123456789abcdef", algorithm="HS256"
    )

    with pytest.raises(AuthenticationError):
        auth.resolve(expired)
    with pytest.raises(AuthenticationError):
        auth.resolve(forged)


def test_alert_preference_can_be_switched_off(auth):
    user = auth.register({"email": "ana@example.com", "full_name": "Ana Tester", "password": "s3cret-pass"})

    updated = auth.update_preferences(user.id, {"alerts_enabled": False})

    assert updated.alerts_enabled is False
    with pytest.raises(ValidationError):
        auth.update_preferences(user.id, {"alerts_enabled": "nope"})


def _register(auth, password: str = "s3cret-pass"):
    return auth.register({"email": "ana@example.com", "full_name": "Ana Tester", "password": password})


def _mailed_code(fake_mailer) -> str:
    return re.search(r"\b(\d{6})\b", fake_mailer.sent[-1]["text"]).group(1)


def test_access_and_refresh_tokens_are_not_interchangeable(auth):
    user = _register(auth)
    access = auth.tokens.issue(user)
    refresh = auth.tokens.issue_refresh(user)

    with pytest.raises(AuthenticationError):
        auth.resolve(refresh)
    with pytest.raises(AuthenticationError):
        auth.refresh(access)

    refreshed_user, new_access, rotated = auth.refresh(refresh)
    assert refreshed_user.id == user.id
    assert auth.resolve(new_access).id == user.id
    assert auth.tokens.decode(rotated, kind="refresh").id == user.id


def test_refresh_requires_a_token(auth):
    with pytest.raises(AuthenticationError):
        auth.refresh(None)


def test_change_password_checks_current_and_history(auth):
    user = _register(auth)

    with pytest.raises(AuthenticationError):
        auth.change_password(user.id, {"current_password": "wrong-pass", "new_password": "brand-new-pass"})
    with pytest.raises(ConflictError):
        auth.change_password(user.id, {"current_password": "s3cret-pass", "new_password": "s3cret-pass"})

    auth.change_password(user.id, {"current_password": "s3cret-pass", "new_password": "brand-new-pass"})

    with pytest.raises(AuthenticationError):
        auth.login({"email": "ana@example.com", "password": "s3cret-pass"})
    assert auth.login({"email": "ana@example.com", "password": "brand-new-pass"})[0].id == user.id
    with pytest.raises(ConflictError) as excinfo:
        auth.change_password(user.id, {"current_password": "brand-new-pass", "new_password": "s3cret-pass"})
    assert excinfo.value.message == "You cannot reuse a previous password"


def test_change_password_validates_new_password(auth):
    user = _register(auth)

    with pytest.raises(ValidationError) as excinfo:
        auth.change_password(user.id, {"new_password": "short"})

    assert set(excinfo.value.errors) == {"current_password", "new_password"}


def test_forgot_password_emails_a_six_digit_code(auth, fake_mailer, user_repo):
    user = _register(auth)

    auth.forgot_password({"email": "ANA@example.com"})

    assert fake_mailer.sent[-1]["to"] == "ana@example.com"
    assert fake_mailer.sent[-1]["subject"] == "Password recovery"
    code = _mailed_code(fake_mailer)
    stored = user_repo.get_by_id(user.id)
    assert stored.reset_code_hash is not None
    assert code not in stored.reset_code_hash
    remaining = stored.reset_code_expires - utcnow()
    assert timedelta(minutes=59) < remaining <= timedelta(hours=1)


def test_forgot_password_for_unknown_email_is_not_found(auth, fake_mailer):
    with pytest.raises(NotFoundError):
        auth.forgot_password({"email": "nobody@example.com"})
    assert fake_mailer.sent == []


def test_reset_password_with_code_is_single_use(auth, fake_mailer):
    _register(auth)
    auth.forgot_password({"email": "ana@example.com"})
    code = _mailed_code(fake_mailer)
    wrong = "000000" if code != "000000" else "111111"

    with pytest.raises(ValidationError):
        auth.reset_password({"email": "ana@example.com", "code": wrong, "password": "fresh-password"})
    auth.reset_password({"email": "ana@example.com", "code": code, "password": "fresh-password"})

    assert auth.login({"email": "ana@example.com", "password": "fresh-password"})[1]
    with pytest.raises(ValidationError) as excinfo:
        auth.reset_password({"email": "ana@example.com", "code": code, "password": "another-password"})
    assert excinfo.value.errors == {"code": ["Invalid or expired code."]}


def test_expired_reset_code_is_rejected(auth, fake_mailer, user_repo):
    user = _register(auth)
    auth.forgot_password({"email": "ana@example.com"})
    code = _mailed_code(fake_mailer)
    stored = user_repo.get_by_id(user.id)
    stored.reset_code_expires = utcnow() - timedelta(seconds=1)
    user_repo.update(stored)

    with pytest.raises(ValidationError):
        auth.reset_password({"email": "ana@example.com", "code": code, "password": "fresh-password"})


def test_update_profile_applies_only_supplied_fields(auth):
    user = _register(auth)

    updated = auth.update_profile(
        user.id,
        {"phone_number": "+34 600 123 456", "country": "Spain", "birthdate": "1990-04-02", "bio": " Hi "},
    )

    assert updated.full_name == "Ana Tester"
    assert updated.phone_number == "+34 600 123 456"
    assert updated.country == "Spain"
    assert updated.birthdate == date(1990, 4, 2)
    assert updated.bio == "Hi"

    cleared = auth.update_profile(user.id, {"birthdate": None, "full_name": "Ana Maria"})
    assert cleared.birthdate is None
    assert cleared.full_name == "Ana Maria"
    assert cleared.country == "Spain"


def test_update_profile_rejects_bad_values(auth):
    user = _register(auth)
    tomorrow = (utcnow() + timedelta(days=2)).strftime("%Y-%m-%d")

    with pytest.raises(ValidationError) as excinfo:
        auth.update_profile(
            user.id, {"full_name": "Al", "phone_number": "call me", "birthdate": tomorrow}
        )

    assert set(excinfo.value.errors) == {"full_name", "phone_number", "birthdate"}

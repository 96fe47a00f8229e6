"""Pytest configuration and shared fixtures for SpendSmart tests.

This module provides database fixtures, test data factories, and helper utilities
for testing domain logic, repositories, services and the HTTP API without touching
the real application database.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from spendsmart.models import Budget, Category, SavingsGoal, Transaction, User
from spendsmart.config import TestConfig
from spendsmart.errors import MailDeliveryError
from spendsmart.infra.database import create_session_factory
from spendsmart.infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelSavingsGoalRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)
from spendsmart.services import jobs
from spendsmart.services.mailer import DeliveryReport

_ENV_VARS = (
    "SPENDSMART_SECRET_KEY",
    "SPENDSMART_DATABASE_URL",
    "SPENDSMART_DEV_MODE",
    "SPENDSMART_TOKEN_TTL_MINUTES",
    "SPENDSMART_REFRESH_TOKEN_TTL_DAYS",
    "SPENDSMART_RESET_CODE_TTL_MINUTES",
    "SPENDSMART_MAIL_HOST",
    "SPENDSMART_MAIL_PORT",
    "SPENDSMART_MAIL_USE_SSL",
    "SPENDSMART_MAIL_USERNAME",
    "SPENDSMART_MAIL_PASSWORD",
    "SPENDSMART_MAIL_SENDER",
    "SPENDSMART_ASYNC_ALERTS",
    "SPENDSMART_SEED_CATEGORIES",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point configuration at a temporary data directory and run dispatches inline."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SPENDSMART_DATA_DIR", str(tmp_path / "data"))
    jobs.set_async_execution(False)
    yield


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one repositories receive in production."""

    return create_session_factory(db_engine)


@pytest.fixture
def user_repo(session_factory):
    return SQLModelUserRepository(session_factory)


@pytest.fixture
def category_repo(session_factory):
    return SQLModelCategoryRepository(session_factory)


@pytest.fixture
def transaction_repo(session_factory):
    return SQLModelTransactionRepository(session_factory)


@pytest.fixture
def budget_repo(session_factory):
    return SQLModelBudgetRepository(session_factory)


@pytest.fixture
def goal_repo(session_factory):
    return SQLModelSavingsGoalRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(user_repo):
    """Factory for creating users with a throwaway password hash."""

    def _create_user(
        email: str = "tester@example.com",
        full_name: str = "Test User",
        alerts_enabled: bool = True,
    ) -> User:
        return user_repo.create(
            User(
                email=email,
                full_name=full_name,
                password_hash="dummy-hash",
                alerts_enabled=alerts_enabled,
            )
        )

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default owner for scoping data."""

    return user_factory()


@pytest.fixture
def category_factory(category_repo):
    """Factory for creating test categories.

    Returns:
        Callable: Function that creates and persists Category instances
    """

    def _create_category(name: str = "Food", applies_to: str = "expense") -> Category:
        return category_repo.create(Category(name=name, applies_to=applies_to))

    return _create_category


@pytest.fixture
def transaction_factory(transaction_repo, user):
    """Factory for creating test transactions directly through the repository.

    Amounts are always positive; ``txn_type`` carries the direction.
    """

    def _create_transaction(
        amount,
        occurred_at: datetime,
        category_id: int | None = None,
        txn_type: str = "expense",
        description: str = "",
        owner: User | None = None,
    ) -> Transaction:
        owner = owner or user
        return transaction_repo.create(
            Transaction(
                user_id=owner.id,
                type=txn_type,
                amount=Decimal(str(amount)),
                occurred_at=occurred_at,
                category_id=category_id,
                description=description,
            ),
            user_id=owner.id,
        )

    return _create_transaction


@pytest.fixture
def budget_factory(session_factory, user):
    """Factory inserting budgets with an explicit creation instant."""

    def _create_budget(
        category_id: int,
        month: str = "2024-06",
        limit="500",
        threshold: float = 80.0,
        created_at: datetime | None = None,
        is_active: bool = True,
        owner: User | None = None,
    ) -> Budget:
        owner = owner or user
        budget = Budget(
            user_id=owner.id,
            category_id=category_id,
            month=month,
            limit_amount=Decimal(str(limit)),
            threshold=threshold,
            is_active=is_active,
        )
        if created_at is not None:
            budget.created_at = created_at
        with session_factory() as session:
            session.add(budget)
            session.commit()
            session.refresh(budget)
            session.expunge(budget)
        return budget

    return _create_budget


@pytest.fixture
def goal_factory(goal_repo, user):
    def _create_goal(
        name: str = "Emergency fund",
        target="1200",
        current="0",
        due_date=None,
        owner: User | None = None,
    ) -> SavingsGoal:
        owner = owner or user
        return goal_repo.create(
            SavingsGoal(
                user_id=owner.id,
                name=name,
                target_amount=Decimal(str(target)),
                current_amount=Decimal(str(current)),
                due_date=due_date,
            ),
            user_id=owner.id,
        )

    return _create_goal


# =============================================================================
# Mail and application fixtures
# =============================================================================


class FakeMailer:
    """Collects outgoing messages instead of talking to an SMTP server."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail = False

    def send(self, recipient: str, subject: str, text: str, html: str) -> DeliveryReport:
        if self.fail:
            raise MailDeliveryError("SMTP relay refused the connection")
        self.sent.append({"to": recipient, "subject": subject, "text": text, "html": html})
        return DeliveryReport(accepted=[recipient])


@pytest.fixture
def fake_mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def app_config(tmp_path, monkeypatch):
    monkeypatch.setenv("SPENDSMART_DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("SPENDSMART_SECRET_KEY", "test-secret-key-with-enough-length-1234")
    return TestConfig()


@pytest.fixture
def app(app_config, fake_mailer):
    from spendsmart import create_app

    flask_app = create_app(app_config, mailer=fake_mailer)
    yield flask_app
    flask_app.extensions["spendsmart"].engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(client):
    """Register a user and return a function producing bearer headers."""

    def _headers(email: str = "ana@example.com", password: str = "s3cret-pass") -> dict:
        client.post(
            "/api/users/register",
            json={"email": email, "full_name": "Ana Tester", "password": password},
        )
        response = client.post("/api/users/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    return _headers


@pytest.fixture
def category_id(app):
    """Id of the seeded ``Food`` expense category."""

    return app.extensions["spendsmart"].category_repo.get_by_name("Food").id

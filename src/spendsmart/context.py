"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import (
    SessionFactory,
    create_db_engine,
    create_session_factory,
    init_database,
)
from .infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelSavingsGoalRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)
from .logging_config import get_logger
from .services import jobs
from .services.alerts import BudgetAlertNotifier
from .services.auth import AuthService, TokenIssuer
from .services.budgeting import BudgetService
from .services.categories import seed_categories
from .services.ledger_service import TransactionService
from .services.mailer import MailTransport, SMTPMailer
from .services.savings import SavingsGoalService
from .services.summary import SummaryService

logger = get_logger("context")


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    # Configuration
    config: BaseConfig

    # Persistence
    engine: Engine
    session_factory: SessionFactory

    # Repositories
    user_repo: SQLModelUserRepository
    category_repo: SQLModelCategoryRepository
    transaction_repo: SQLModelTransactionRepository
    budget_repo: SQLModelBudgetRepository
    goal_repo: SQLModelSavingsGoalRepository

    # Services
    auth: AuthService
    budgets: BudgetService
    ledger: TransactionService
    savings: SavingsGoalService
    summary: SummaryService
    notifier: BudgetAlertNotifier
    mailer: Any


def create_app_context(
    config: Optional[BaseConfig] = None, *, mailer: Optional[MailTransport] = None
) -> AppContext:
    """Create the engine, repositories and services for one application."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    user_repo = SQLModelUserRepository(session_factory)
    category_repo = SQLModelCategoryRepository(session_factory)
    transaction_repo = SQLModelTransactionRepository(session_factory)
    budget_repo = SQLModelBudgetRepository(session_factory)
    goal_repo = SQLModelSavingsGoalRepository(session_factory)

    if config.SEED_CATEGORIES != "off":
        seed_categories(category_repo, only_if_empty=config.SEED_CATEGORIES == "if-empty")

    if mailer is None:
        mailer = SMTPMailer(config)
        if not config.mail_configured:
            logger.warning("Mail credentials missing; budget alerts will not be delivered")

    jobs.set_async_execution(config.ASYNC_ALERTS)
    notifier = BudgetAlertNotifier(
        budgets=budget_repo,
        categories=category_repo,
        transactions=transaction_repo,
        users=user_repo,
        mailer=mailer,
    )
    ledger = TransactionService(
        transactions=transaction_repo,
        categories=category_repo,
        alert_check=notifier.check,
    )

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        user_repo=user_repo,
        category_repo=category_repo,
        transaction_repo=transaction_repo,
        budget_repo=budget_repo,
        goal_repo=goal_repo,
        auth=AuthService(
            users=user_repo,
            tokens=TokenIssuer(config),
            mailer=mailer,
            reset_code_ttl_minutes=config.RESET_CODE_TTL_MINUTES,
        ),
        budgets=BudgetService(
            budgets=budget_repo,
            categories=category_repo,
            transactions=transaction_repo,
            max_active=config.MAX_ACTIVE_BUDGETS,
        ),
        ledger=ledger,
        savings=SavingsGoalService(goals=goal_repo, categories=category_repo, ledger=ledger),
        summary=SummaryService(
            transactions=transaction_repo,
            categories=category_repo,
            goals=goal_repo,
            recent_limit=config.RECENT_TRANSACTIONS,
        ),
        notifier=notifier,
        mailer=mailer,
    )

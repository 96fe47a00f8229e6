"""Budget threshold notifications.

After an expense is written, the threshold check re-computes the spend for the
matching budget and emails the owner once ``percent used >= threshold``. The
check never raises: every failure is logged and the triggering write stays
successful.
"""

from __future__ import annotations

from decimal import Decimal
from html import escape

from ..domain.repositories import (
    BudgetRepository,
    CategoryRepository,
    TransactionRepository,
    UserRepository,
)
from ..errors import MailDeliveryError
from ..logging_config import get_logger
from .aggregation import spent_for_budget
from .budgeting import percent_of_limit
from .mailer import MailContent, MailTransport

logger = get_logger("alerts")

FALLBACK_CATEGORY_NAME = "Category"


def render_alert(
    *, category: str, month: str, percent: float, limit: Decimal, spent: Decimal
) -> MailContent:
    """Format the alert in plain text and HTML."""

    subject = "Budget alert"
    text = (
        f"Your budget for {category} in {month} reached {percent:.1f}%. "
        f"Spent: ${spent:.2f} / Limit: ${limit:.2f}"
    )
    html = (
        "<p>Hello,</p>"
        f"<p>Your budget for <strong>{escape(category)}</strong> in "
        f"<strong>{escape(month)}</strong> has reached <strong>{percent:.1f}%</strong> "
        "of its limit.</p>"
        f"<p>Limit: ${limit:.2f}</p>"
        f"<p>Spent: ${spent:.2f}</p>"
        "<p>We recommend reviewing your expenses.</p>"
    )
    return MailContent(subject=subject, text=text, html=html)


class BudgetAlertNotifier:
    """Re-evaluates a budget after an expense and dispatches threshold alerts."""

    def __init__(
        self,
        *,
        budgets: BudgetRepository,
        categories: CategoryRepository,
        transactions: TransactionRepository,
        users: UserRepository,
        mailer: MailTransport,
    ) -> None:
        self.budgets = budgets
        self.categories = categories
        self.transactions = transactions
        self.users = users
        self.mailer = mailer

    def check(self, user_id: int, category_id: int, month: str) -> bool:
        """Return True when an alert was delivered; never raises."""

        context = {"user_id": user_id, "category_id": category_id, "month": month}
        try:
            return self._check(user_id, category_id, month)
        except Exception:
            logger.exception("Budget alert check failed", extra=context)
            return False

    def _check(self, user_id: int, category_id: int, month: str) -> bool:
        context = {"user_id": user_id, "category_id": category_id, "month": month}
        budget = self.budgets.find_active(user_id=user_id, category_id=category_id, month=month)
        if budget is None:
            logger.debug("No active budget for expense", extra=context)
            return False

        spent = spent_for_budget(self.transactions, budget)
        limit = Decimal(budget.limit_amount)
        percent = percent_of_limit(spent, limit)
        if percent < budget.threshold:
            logger.info(
                "Budget threshold not reached",
                extra={**context, "percent": percent, "threshold": budget.threshold},
            )
            return False

        user = self.users.get_by_id(user_id)
        if user is None or not user.email:
            logger.info("Budget alert skipped: no notification address", extra=context)
            return False
        if not user.alerts_enabled:
            logger.info("Budget alert skipped: alerts disabled by user", extra=context)
            return False

        category = self.categories.get_by_id(category_id)
        message = render_alert(
            category=category.name if category else FALLBACK_CATEGORY_NAME,
            month=month,
            percent=percent,
            limit=limit,
            spent=spent,
        )
        try:
            report = self.mailer.send(user.email, message.subject, message.text, message.html)
        except MailDeliveryError as exc:
            logger.error("Budget alert delivery failed: %s", exc, extra=context)
            return False

        logger.info(
            "Budget alert sent",
            extra={
                **context,
                "percent": round(percent, 1),
                "accepted": getattr(report, "accepted", None),
                "rejected": getattr(report, "rejected", None),
            },
        )
        return True

"""Dashboard summary for one month."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..clock import today as current_date
from ..domain.repositories import (
    CategoryRepository,
    SavingsGoalRepository,
    TransactionRepository,
)
from ..errors import ValidationError
from ..models.category import EXPENSE, INCOME
from . import money
from .periods import month_window, validate_month
from .savings import progress

UNCATEGORIZED = "Uncategorized"
NO_ACTIVE_GOALS = {"name": "No active goals"}


class SummaryService:
    def __init__(
        self,
        *,
        transactions: TransactionRepository,
        categories: CategoryRepository,
        goals: SavingsGoalRepository,
        recent_limit: int = 10,
    ) -> None:
        self.transactions = transactions
        self.categories = categories
        self.goals = goals
        self.recent_limit = recent_limit

    def monthly_summary(
        self, user_id: int, month: Optional[str], today: Optional[date] = None
    ) -> dict[str, Any]:
        """Balances for ``month`` plus recent activity; ``month`` is required."""

        if not month:
            raise ValidationError({"month": ["Month is required."]}, "Month is required")
        today = today or current_date()
        try:
            validate_month(month)
        except ValueError as exc:
            raise ValidationError({"month": [str(exc)]}) from exc

        window = month_window(month)
        total_income = self._total(user_id, INCOME)
        total_expense = self._total(user_id, EXPENSE)
        monthly_income = self._total(user_id, INCOME, window.start, window.end)
        monthly_expense = self._total(user_id, EXPENSE, window.start, window.end)

        goals = self.goals.list_active(user_id=user_id)
        total_saved = money.sum_amounts(goal.current_amount for goal in goals)

        return {
            "month": month,
            "totalBalance": money.to_number(total_income - total_expense),
            "monthlyIncome": money.to_number(monthly_income),
            "monthlyExpense": money.to_number(monthly_expense),
            "monthlySavings": money.to_number(monthly_income - monthly_expense),
            "totalSaved": money.to_number(total_saved),
            "recentTransactions": self._recent(user_id),
            "closestGoal": self._closest_goal(goals, today),
        }

    def _total(self, user_id, txn_type, start=None, end=None):
        return money.sum_amounts(
            self.transactions.amounts_in_window(
                user_id=user_id, txn_type=txn_type, start=start, end=end
            )
        )

    def _recent(self, user_id: int) -> list[dict[str, Any]]:
        names: dict[int, str] = {}
        rows = []
        for txn in self.transactions.recent(user_id=user_id, limit=self.recent_limit):
            category_name = UNCATEGORIZED
            if txn.category_id is not None:
                if txn.category_id not in names:
                    category = self.categories.get_by_id(txn.category_id)
                    names[txn.category_id] = category.name if category else UNCATEGORIZED
                category_name = names[txn.category_id]
            rows.append(
                {
                    "_id": txn.id,
                    "type": txn.type,
                    "amount": money.to_number(txn.amount),
                    "date": txn.occurred_at.isoformat(),
                    "category": category_name,
                    "description": txn.description,
                }
            )
        return rows

    @staticmethod
    def _closest_goal(goals, today: date) -> dict[str, Any]:
        """Upcoming goal nearest to completion."""

        upcoming = [goal for goal in goals if goal.due_date >= today]
        if not upcoming:
            return dict(NO_ACTIVE_GOALS)
        goal = max(upcoming, key=lambda item: progress(item.target_amount, item.current_amount))
        return {
            "_id": goal.id,
            "name": goal.name,
            "target_amount": money.to_number(goal.target_amount),
            "current_amount": money.to_number(goal.current_amount),
            "due_date": goal.due_date.isoformat(),
            "progress": round(progress(goal.target_amount, goal.current_amount), 2),
        }

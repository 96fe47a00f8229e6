"""Savings goals: quota projection and goal lifecycle."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..clock import today as current_date
from ..clock import utcnow
from ..domain.repositories import CategoryRepository, SavingsGoalRepository
from ..errors import ConflictError, NotFoundError
from ..forms.savings import AddMoneyForm, SavingsGoalForm
from ..logging_config import get_logger
from ..models.category import EXPENSE, Category
from ..models.savings_goal import SavingsGoal
from . import money
from .ledger_service import TransactionService

logger = get_logger("savings")

CONTRIBUTION_CATEGORY = "Other"
CONTRIBUTION_DESCRIPTION = "savings goal contribution"
OVERDUE = "overdue"
ACTIVE = "active"


def months_until(due: date, today: date) -> int:
    """Whole calendar months from ``today`` to ``due``, never negative."""

    months = (due.year - today.year) * 12 + (due.month - today.month)
    return max(0, months)


def monthly_quota(target: Decimal, current: Decimal, due: date, today: date) -> Decimal:
    """Monthly contribution needed to reach ``target`` by ``due``.

    The current month counts as one installment, so a goal due this month
    needs the full remaining amount.
    """

    remaining = max(money.ZERO, money.to_decimal(target) - money.to_decimal(current))
    return remaining / (months_until(due, today) + 1)


def progress(target: Decimal, current: Decimal) -> float:
    target = money.to_decimal(target)
    if not target:
        return 0.0
    return min(100.0, float(money.to_decimal(current) / target * 100))


def goal_status(due: date, today: date) -> str:
    return OVERDUE if today > due else ACTIVE


def serialize_goal(goal: SavingsGoal, today: Optional[date] = None) -> dict[str, Any]:
    """Goal payload enriched with status, progress and monthly quota."""

    today = today or current_date()
    quota = monthly_quota(goal.target_amount, goal.current_amount, goal.due_date, today)
    return {
        "_id": goal.id,
        "name": goal.name,
        "description": goal.description,
        "target_amount": money.to_number(goal.target_amount),
        "current_amount": money.to_number(goal.current_amount),
        "due_date": goal.due_date.isoformat(),
        "status": goal_status(goal.due_date, today),
        "progress": round(progress(goal.target_amount, goal.current_amount), 2),
        "monthly_quota": money.to_number(money.quantize(quota)),
    }


class SavingsGoalService:
    def __init__(
        self,
        *,
        goals: SavingsGoalRepository,
        categories: CategoryRepository,
        ledger: TransactionService,
    ) -> None:
        self.goals = goals
        self.categories = categories
        self.ledger = ledger

    def create_goal(self, user_id: int, data: Mapping[str, Any]) -> SavingsGoal:
        form = SavingsGoalForm.from_mapping(data)
        form.validate_or_raise()
        self._ensure_unique_name(user_id, form.name)  # type: ignore[arg-type]

        goal = SavingsGoal(
            user_id=user_id,
            name=form.name,  # type: ignore[arg-type]
            description=form.description or "",
            target_amount=form.target_amount,  # type: ignore[arg-type]
            current_amount=money.quantize(0),
            due_date=form.due_date,  # type: ignore[arg-type]
        )
        goal = self.goals.create(goal, user_id=user_id)
        logger.info("Savings goal created", extra={"user_id": user_id, "goal_id": goal.id})
        return goal

    def list_goals(self, user_id: int, today: Optional[date] = None) -> list[dict[str, Any]]:
        today = today or current_date()
        return [serialize_goal(goal, today) for goal in self.goals.list_active(user_id=user_id)]

    def update_goal(self, user_id: int, goal_id: int, data: Mapping[str, Any]) -> SavingsGoal:
        """Update only the supplied fields, with the same rules as creation."""

        goal = self._require(user_id, goal_id)
        form = SavingsGoalForm.from_mapping(data)
        form.partial = True
        form.validate_or_raise()

        if form.name is not None and form.name != goal.name:
            self._ensure_unique_name(user_id, form.name, exclude_id=goal.id)
            goal.name = form.name
        if form.description is not None:
            goal.description = form.description
        if form.target_amount is not None:
            goal.target_amount = form.target_amount
            if goal.current_amount > goal.target_amount:
                goal.current_amount = goal.target_amount
        if form.due_date is not None:
            goal.due_date = form.due_date

        return self.goals.update(goal, user_id=user_id)

    def delete_goal(self, user_id: int, goal_id: int) -> None:
        goal = self._require(user_id, goal_id)
        goal.is_deleted = True
        self.goals.update(goal, user_id=user_id)
        logger.info("Savings goal deleted", extra={"user_id": user_id, "goal_id": goal_id})

    def add_money(self, user_id: int, goal_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """Record a contribution as an expense, then raise the goal's balance.

        The balance is capped at the target. When the expense cannot be
        recorded the goal is left untouched and the error propagates.
        """

        form = AddMoneyForm.from_mapping(data)
        form.validate_or_raise()
        goal = self._require(user_id, goal_id)
        amount: Decimal = form.amount  # type: ignore[assignment]

        category = self._contribution_category()
        self.ledger.create_transaction(
            user_id,
            {
                "type": EXPENSE,
                "amount": amount,
                "date": utcnow(),
                "category_id": category.id,
                "description": CONTRIBUTION_DESCRIPTION,
            },
        )

        target = money.to_decimal(goal.target_amount)
        goal.current_amount = min(money.to_decimal(goal.current_amount) + amount, target)
        goal = self.goals.update(goal, user_id=user_id)
        logger.info(
            "Savings contribution added",
            extra={"user_id": user_id, "goal_id": goal.id, "amount": str(amount)},
        )
        return {
            "_id": goal.id,
            "name": goal.name,
            "current_amount": money.to_number(goal.current_amount),
            "target_amount": money.to_number(goal.target_amount),
            "completed": money.to_decimal(goal.current_amount) >= target,
        }

    def _contribution_category(self) -> Category:
        category = self.categories.get_by_name(CONTRIBUTION_CATEGORY)
        if category is None:
            category, _ = self.categories.upsert_by_name(
                Category(name=CONTRIBUTION_CATEGORY, applies_to=EXPENSE)
            )
        return category

    def _ensure_unique_name(self, user_id: int, name: str, exclude_id: Optional[int] = None) -> None:
        existing = self.goals.get_by_name(name, user_id=user_id)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("A savings goal with this name already exists")

    def _require(self, user_id: int, goal_id: int) -> SavingsGoal:
        goal = self.goals.get_by_id(goal_id, user_id=user_id)
        if goal is None:
            raise NotFoundError("Savings goal not found")
        return goal

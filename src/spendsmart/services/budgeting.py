"""Budget evaluation and lifecycle services."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from threading import Lock
from typing import Any, Mapping

from ..domain.repositories import BudgetRepository, CategoryRepository, TransactionRepository
from ..errors import ConflictError, DataIntegrityError, NotFoundError, ValidationError
from ..forms.budget import BudgetForm
from ..logging_config import get_logger
from ..models.budget import Budget
from . import money
from .aggregation import spent_for_budget

logger = get_logger("budgeting")

# Serializes the active-count check with the upsert that follows it.
_CREATE_LOCK = Lock()


@dataclass(slots=True)
class BudgetEvaluation:
    """Budget enriched with its spend for display."""

    budget_id: int
    category: str
    month: str
    limit: Decimal
    threshold: float
    is_active: bool
    spent: Decimal
    percent_used: float

    @property
    def available(self) -> Decimal:
        return self.limit - self.spent

    @property
    def alert(self) -> bool:
        return self.is_active and self.threshold <= self.percent_used

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.budget_id,
            "category": self.category,
            "month": self.month,
            "limit": money.to_number(self.limit),
            "threshold": self.threshold,
            "isActive": self.is_active,
            "spent": money.to_number(self.spent),
            "available": money.to_number(self.available),
            "percentUsed": self.percent_used,
            "alert": self.alert,
        }


def percent_of_limit(spent: Decimal, limit: Decimal) -> float:
    """Unrounded share of ``limit`` consumed by ``spent``, 0 for a zero limit."""

    if not limit:
        return 0.0
    return float(spent / limit * 100)


def percent_used(spent: Decimal, limit: Decimal) -> float:
    """Share of the limit used, rounded to one decimal place."""

    return round(percent_of_limit(spent, limit), 1)


def evaluate_budget(budget: Budget, category_name: str, spent: Decimal) -> BudgetEvaluation:
    limit = money.to_decimal(budget.limit_amount)
    return BudgetEvaluation(
        budget_id=budget.id,  # type: ignore[arg-type]
        category=category_name,
        month=budget.month,
        limit=limit,
        threshold=budget.threshold,
        is_active=budget.is_active,
        spent=spent,
        percent_used=percent_used(spent, limit),
    )


class BudgetService:
    """Create, list, toggle and soft-delete budgets for a user."""

    def __init__(
        self,
        *,
        budgets: BudgetRepository,
        categories: CategoryRepository,
        transactions: TransactionRepository,
        max_active: int = 10,
    ) -> None:
        self.budgets = budgets
        self.categories = categories
        self.transactions = transactions
        self.max_active = max_active

    def create_budget(self, user_id: int, data: Mapping[str, Any]) -> Budget:
        """Upsert the budget for (user, category, month) and reactivate it.

        Raises ``ConflictError`` once the user holds ``max_active`` active budgets.
        """
        form = BudgetForm.from_mapping(data)
        form.validate_or_raise()
        if self.categories.get_by_id(form.category_id) is None:  # type: ignore[arg-type]
            raise ValidationError({"category_id": ["Unknown category."]})

        with _CREATE_LOCK:
            active = self.budgets.count_active(user_id=user_id)
            if active >= self.max_active:
                raise ConflictError(
                    f"You can only have up to {self.max_active} active budgets at the same time."
                )
            budget = self.budgets.upsert(
                user_id=user_id,
                category_id=form.category_id,  # type: ignore[arg-type]
                month=form.month,
                limit_amount=form.limit,  # type: ignore[arg-type]
                threshold=form.threshold,  # type: ignore[arg-type]
            )
        logger.info(
            "Budget saved",
            extra={"user_id": user_id, "budget_id": budget.id, "month": budget.month},
        )
        return budget

    def list_budgets(self, user_id: int) -> list[BudgetEvaluation]:
        """Evaluate the most recent active budgets, newest first."""
        budgets = self.budgets.list_active(user_id=user_id, limit=self.max_active)

        names: dict[int, str] = {}
        for budget in budgets:
            category = self.categories.get_by_id(budget.category_id)
            if category is None:
                logger.error(
                    "Budget references a missing category",
                    extra={"budget_id": budget.id, "category_id": budget.category_id},
                )
                raise DataIntegrityError("Invalid category reference")
            names[budget.id] = category.name  # type: ignore[index]

        return [
            evaluate_budget(budget, names[budget.id], spent_for_budget(self.transactions, budget))  # type: ignore[index]
            for budget in budgets
        ]

    def toggle_budget(self, user_id: int, budget_id: int) -> tuple[Budget, str]:
        budget = self._require(user_id, budget_id)
        with _CREATE_LOCK:
            if not budget.is_active and self.budgets.count_active(user_id=user_id) >= self.max_active:
                raise ConflictError(
                    f"You can only have up to {self.max_active} active budgets at the same time."
                )
            budget.is_active = not budget.is_active
            budget = self.budgets.update(budget, user_id=user_id)
        message = "Budget activated" if budget.is_active else "Budget deactivated"
        return budget, message

    def delete_budget(self, user_id: int, budget_id: int) -> None:
        budget = self._require(user_id, budget_id)
        budget.is_deleted = True
        budget.is_active = False
        self.budgets.update(budget, user_id=user_id)

    def _require(self, user_id: int, budget_id: int) -> Budget:
        budget = self.budgets.get_by_id(budget_id, user_id=user_id)
        if budget is None:
            raise NotFoundError("Budget not found")
        return budget


def serialize_budget(budget: Budget) -> dict[str, Any]:
    return {
        "_id": budget.id,
        "category_id": budget.category_id,
        "month": budget.month,
        "limit": money.to_number(budget.limit_amount),
        "threshold": budget.threshold,
        "isActive": budget.is_active,
        "isDeleted": budget.is_deleted,
        "createdAt": budget.created_at.isoformat(),
        "updatedAt": budget.updated_at.isoformat(),
    }

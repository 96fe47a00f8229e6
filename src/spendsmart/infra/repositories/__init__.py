"""Concrete repository implementations using SQLModel."""

from .budget import SQLModelBudgetRepository
from .category import SQLModelCategoryRepository
from .savings_goal import SQLModelSavingsGoalRepository
from .transaction import SQLModelTransactionRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelBudgetRepository",
    "SQLModelCategoryRepository",
    "SQLModelSavingsGoalRepository",
    "SQLModelTransactionRepository",
    "SQLModelUserRepository",
]

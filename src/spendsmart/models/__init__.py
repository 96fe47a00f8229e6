"""SQLModel table exports."""

from .budget import Budget
from .category import Category
from .password_history import PasswordHistory
from .savings_goal import SavingsGoal
from .transaction import Transaction
from .user import User

__all__ = [
    "Budget",
    "Category",
    "PasswordHistory",
    "SavingsGoal",
    "Transaction",
    "User",
]

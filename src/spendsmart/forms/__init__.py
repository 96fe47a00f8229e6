"""Input validation for budgets, transactions, savings goals and user accounts."""

from .auth import (
    ChangePasswordForm,
    ForgotPasswordForm,
    LoginForm,
    ProfileForm,
    RegistrationForm,
    ResetPasswordForm,
)
from .budget import BudgetForm
from .savings import AddMoneyForm, SavingsGoalForm
from .transaction import TransactionFilterForm, TransactionForm

__all__ = [
    "AddMoneyForm",
    "BudgetForm",
    "ChangePasswordForm",
    "ForgotPasswordForm",
    "LoginForm",
    "ProfileForm",
    "RegistrationForm",
    "ResetPasswordForm",
    "SavingsGoalForm",
    "TransactionFilterForm",
    "TransactionForm",
]

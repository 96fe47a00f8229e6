"""Spend aggregation over period windows."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from ..models.budget import Budget
from ..models.category import EXPENSE
from . import money
from .periods import PeriodWindow, month_window


class AmountSource(Protocol):
    """The slice of the transaction repository the aggregator needs."""

    def amounts_in_window(self, *, user_id, txn_type, start=None, end=None, category_id=None):
        ...  # pragma: no cover - interface


def spent_in_period(
    repository: AmountSource,
    *,
    user_id: int,
    category_id: int,
    window: PeriodWindow,
    txn_type: str = EXPENSE,
) -> Decimal:
    """Sum of ``txn_type`` amounts for one user and category inside ``window``."""

    amounts = repository.amounts_in_window(
        user_id=user_id,
        category_id=category_id,
        txn_type=txn_type,
        start=window.start,
        end=window.end,
    )
    return money.sum_amounts(amounts)


def spent_for_budget(repository: AmountSource, budget: Budget) -> Decimal:
    """Spend counted against ``budget``, starting from its creation instant."""

    window = month_window(budget.month, anchor=budget.created_at)
    return spent_in_period(
        repository,
        user_id=budget.user_id,
        category_id=budget.category_id,
        window=window,
    )

"""Transaction creation, edits and filtering.

``TransactionService.create_transaction`` is the single creation path: the
HTTP handler and savings contributions both go through it, so every expense
triggers the same budget threshold check.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from ..domain.repositories import CategoryRepository, TransactionRepository
from ..errors import NotFoundError, ValidationError
from ..forms.transaction import TransactionFilterForm, TransactionForm
from ..logging_config import get_logger
from ..models.category import EXPENSE
from ..models.transaction import Transaction
from . import jobs, money
from .periods import month_key

logger = get_logger("ledger")

AlertCheck = Callable[[int, int, str], Any]


class TransactionService:
    """Ledger operations scoped to a single owner per call."""

    def __init__(
        self,
        *,
        transactions: TransactionRepository,
        categories: CategoryRepository,
        alert_check: Optional[AlertCheck] = None,
    ) -> None:
        self.transactions = transactions
        self.categories = categories
        self.alert_check = alert_check

    def create_transaction(self, user_id: int, fields: Mapping[str, Any]) -> Transaction:
        form = self._validated(fields)
        transaction = Transaction(
            user_id=user_id,
            type=form.type,  # type: ignore[arg-type]
            amount=form.amount,  # type: ignore[arg-type]
            occurred_at=form.occurred_at,  # type: ignore[arg-type]
            category_id=form.category_id,
            description=form.description,
        )
        transaction = self.transactions.create(transaction, user_id=user_id)
        logger.info(
            "Transaction recorded",
            extra={"user_id": user_id, "transaction_id": transaction.id, "type": transaction.type},
        )
        self._dispatch_alert_check(transaction)
        return transaction

    def update_transaction(
        self, user_id: int, transaction_id: int, fields: Mapping[str, Any]
    ) -> Transaction:
        """Apply a partial update; omitted fields keep their stored values."""

        transaction = self.transactions.get_by_id(transaction_id, user_id=user_id)
        if transaction is None:
            raise NotFoundError("Transaction not found")

        merged = {
            "type": transaction.type,
            "amount": transaction.amount,
            "date": transaction.occurred_at,
            "category_id": transaction.category_id,
            "description": transaction.description,
        }
        merged.update({key: value for key, value in fields.items() if key in merged})
        form = self._validated(merged)

        transaction.type = form.type  # type: ignore[assignment]
        transaction.amount = form.amount  # type: ignore[assignment]
        transaction.occurred_at = form.occurred_at  # type: ignore[assignment]
        transaction.category_id = form.category_id
        transaction.description = form.description
        transaction = self.transactions.update(transaction, user_id=user_id)
        logger.info(
            "Transaction updated",
            extra={"user_id": user_id, "transaction_id": transaction.id},
        )
        self._dispatch_alert_check(transaction)
        return transaction

    def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        if not self.transactions.delete(transaction_id, user_id=user_id):
            raise NotFoundError("Transaction not found")
        logger.info(
            "Transaction deleted",
            extra={"user_id": user_id, "transaction_id": transaction_id},
        )

    def filter_transactions(
        self, user_id: int, filters: Mapping[str, Any] | None = None
    ) -> list[Transaction]:
        form = TransactionFilterForm.from_mapping(filters)
        form.validate_or_raise()
        return self.transactions.search(
            user_id=user_id,
            txn_type=form.type,
            category_id=form.category_id,
            start=form.start,
            end=form.end,
        )

    def _validated(self, fields: Mapping[str, Any]) -> TransactionForm:
        form = TransactionForm.from_mapping(fields)
        form.validate_or_raise()
        if form.category_id is not None and self.categories.get_by_id(form.category_id) is None:
            raise ValidationError({"category_id": ["Unknown category."]})
        return form

    def _dispatch_alert_check(self, transaction: Transaction) -> None:
        """Queue the threshold check once the write has committed."""

        if self.alert_check is None:
            return
        if transaction.type != EXPENSE or transaction.category_id is None:
            return
        jobs.enqueue(
            "budget-alert",
            self.alert_check,
            metadata={"transaction_id": transaction.id},
            user_id=transaction.user_id,
            category_id=transaction.category_id,
            month=month_key(transaction.occurred_at),
        )


def serialize_transaction(transaction: Transaction) -> dict[str, Any]:
    return {
        "_id": transaction.id,
        "type": transaction.type,
        "amount": money.to_number(transaction.amount),
        "date": transaction.occurred_at.isoformat(),
        "category_id": transaction.category_id,
        "description": transaction.description,
        "createdAt": transaction.created_at.isoformat(),
        "updatedAt": transaction.updated_at.isoformat(),
    }

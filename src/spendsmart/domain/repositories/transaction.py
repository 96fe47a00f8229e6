"""Transaction repository protocol."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Repository for ledger transactions."""

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a new transaction."""
        ...

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update an existing transaction."""
        ...

    def delete(self, transaction_id: int, *, user_id: int) -> bool:
        """Delete a transaction, returning False when nothing matched."""
        ...

    def search(
        self,
        *,
        user_id: int,
        txn_type: Optional[str] = None,
        category_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Transaction]:
        """Filter transactions, newest occurrence first. Bounds are inclusive."""
        ...

    def amounts_in_window(
        self,
        *,
        user_id: int,
        txn_type: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category_id: Optional[int] = None,
    ) -> list[Decimal]:
        """Amounts of matching transactions with ``start <= occurred_at < end``."""
        ...

    def recent(self, *, user_id: int, limit: int) -> list[Transaction]:
        """Most recently recorded transactions."""
        ...

"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlmodel import select

from ...clock import utcnow
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            transaction.user_id = user_id
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update an existing transaction."""
        with self.session_factory() as session:
            transaction.user_id = user_id
            transaction.updated_at = utcnow()
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def delete(self, transaction_id: int, *, user_id: int) -> bool:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if transaction is None:
                return False
            session.delete(transaction)
            session.commit()
            return True

    def search(
        self,
        *,
        user_id: int,
        txn_type: Optional[str] = None,
        category_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Transaction]:
        """Filter transactions with optional type, category and inclusive date bounds."""
        with self.session_factory() as session:
            statement = select(Transaction).where(Transaction.user_id == user_id)

            if txn_type:
                statement = statement.where(Transaction.type == txn_type)
            if category_id:
                statement = statement.where(Transaction.category_id == category_id)
            if start:
                statement = statement.where(Transaction.occurred_at >= start)
            if end:
                statement = statement.where(Transaction.occurred_at <= end)

            statement = statement.order_by(
                Transaction.occurred_at.desc(), Transaction.id.desc()  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def amounts_in_window(
        self,
        *,
        user_id: int,
        txn_type: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category_id: Optional[int] = None,
    ) -> list[Decimal]:
        """Return amounts in ``[start, end)``.

        Amounts are summed by the caller in Decimal; SQLite would sum the
        NUMERIC column as a float.
        """
        with self.session_factory() as session:
            statement = (
                select(Transaction.amount)
                .where(Transaction.user_id == user_id)
                .where(Transaction.type == txn_type)
            )
            if category_id is not None:
                statement = statement.where(Transaction.category_id == category_id)
            if start is not None:
                statement = statement.where(Transaction.occurred_at >= start)
            if end is not None:
                statement = statement.where(Transaction.occurred_at < end)  # exclusive end
            return list(session.exec(statement).all())

    def recent(self, *, user_id: int, limit: int) -> list[Transaction]:
        """Most recently recorded transactions."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .order_by(Transaction.created_at.desc(), Transaction.id.desc())  # type: ignore
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

"""SQLModel implementation of Budget repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...clock import utcnow
from ...models.budget import Budget
from ..database import SessionFactory


class SQLModelBudgetRepository:
    """SQLModel-based budget repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        """Retrieve a non-deleted budget by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Budget)
                .where(Budget.id == budget_id)
                .where(Budget.user_id == user_id)
                .where(Budget.is_deleted == False)  # noqa: E712
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def find_active(self, *, user_id: int, category_id: int, month: str) -> Optional[Budget]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Budget)
                .where(Budget.user_id == user_id)
                .where(Budget.category_id == category_id)
                .where(Budget.month == month)
                .where(Budget.is_active == True)  # noqa: E712
                .where(Budget.is_deleted == False)  # noqa: E712
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def count_active(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(Budget)
                .where(Budget.user_id == user_id)
                .where(Budget.is_active == True)  # noqa: E712
                .where(Budget.is_deleted == False)  # noqa: E712
            )
            return int(session.exec(statement).one())

    def list_active(self, *, user_id: int, limit: int) -> list[Budget]:
        """List active budgets, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Budget)
                .where(Budget.user_id == user_id)
                .where(Budget.is_active == True)  # noqa: E712
                .where(Budget.is_deleted == False)  # noqa: E712
                .order_by(Budget.created_at.desc(), Budget.id.desc())  # type: ignore
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert(
        self,
        *,
        user_id: int,
        category_id: int,
        month: str,
        limit_amount: Decimal,
        threshold: float,
    ) -> Budget:
        """Insert or overwrite the budget matching (user, category, month).

        Matches regardless of the active/deleted flags so that recreating a
        removed budget reactivates the stored row instead of duplicating it.
        """
        try:
            return self._upsert_once(
                user_id=user_id,
                category_id=category_id,
                month=month,
                limit_amount=limit_amount,
                threshold=threshold,
            )
        except IntegrityError:
            # A concurrent insert won the unique key; the retry takes the update branch.
            return self._upsert_once(
                user_id=user_id,
                category_id=category_id,
                month=month,
                limit_amount=limit_amount,
                threshold=threshold,
            )

    def _upsert_once(
        self,
        *,
        user_id: int,
        category_id: int,
        month: str,
        limit_amount: Decimal,
        threshold: float,
    ) -> Budget:
        with self.session_factory() as session:
            existing = self._find_any(session, user_id=user_id, category_id=category_id, month=month)
            if existing is not None:
                existing.limit_amount = limit_amount
                existing.threshold = threshold
                existing.is_active = True
                existing.is_deleted = False
                existing.updated_at = utcnow()
                budget = existing
            else:
                budget = Budget(
                    user_id=user_id,
                    category_id=category_id,
                    month=month,
                    limit_amount=limit_amount,
                    threshold=threshold,
                )
            session.add(budget)
            session.commit()
            session.refresh(budget)
            session.expunge(budget)
            return budget

    @staticmethod
    def _find_any(session: Session, *, user_id: int, category_id: int, month: str) -> Optional[Budget]:
        return session.exec(
            select(Budget)
            .where(Budget.user_id == user_id)
            .where(Budget.category_id == category_id)
            .where(Budget.month == month)
        ).first()

    def update(self, budget: Budget, *, user_id: int) -> Budget:
        """Update an existing budget."""
        with self.session_factory() as session:
            budget.user_id = user_id
            budget.updated_at = utcnow()
            session.add(budget)
            session.commit()
            session.refresh(budget)
            session.expunge(budget)
            return budget

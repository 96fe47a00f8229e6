"""SQLModel implementation of SavingsGoal repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...clock import utcnow
from ...models.savings_goal import SavingsGoal
from ..database import SessionFactory


class SQLModelSavingsGoalRepository:
    """SQLModel-based savings goal repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, goal_id: int, *, user_id: int) -> Optional[SavingsGoal]:
        with self.session_factory() as session:
            obj = session.exec(
                select(SavingsGoal)
                .where(SavingsGoal.id == goal_id)
                .where(SavingsGoal.user_id == user_id)
                .where(SavingsGoal.is_deleted == False)  # noqa: E712
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, *, user_id: int) -> Optional[SavingsGoal]:
        with self.session_factory() as session:
            obj = session.exec(
                select(SavingsGoal)
                .where(SavingsGoal.name == name)
                .where(SavingsGoal.user_id == user_id)
                .where(SavingsGoal.is_deleted == False)  # noqa: E712
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_active(self, *, user_id: int) -> list[SavingsGoal]:
        with self.session_factory() as session:
            statement = (
                select(SavingsGoal)
                .where(SavingsGoal.user_id == user_id)
                .where(SavingsGoal.is_deleted == False)  # noqa: E712
                .order_by(SavingsGoal.due_date, SavingsGoal.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, goal: SavingsGoal, *, user_id: int) -> SavingsGoal:
        with self.session_factory() as session:
            goal.user_id = user_id
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def update(self, goal: SavingsGoal, *, user_id: int) -> SavingsGoal:
        with self.session_factory() as session:
            goal.user_id = user_id
            goal.updated_at = utcnow()
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

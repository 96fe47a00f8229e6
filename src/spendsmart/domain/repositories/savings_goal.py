"""Savings goal repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.savings_goal import SavingsGoal


class SavingsGoalRepository(Protocol):
    """Repository for savings goals. Deleted goals are never returned."""

    def get_by_id(self, goal_id: int, *, user_id: int) -> Optional[SavingsGoal]:
        ...

    def get_by_name(self, name: str, *, user_id: int) -> Optional[SavingsGoal]:
        ...

    def list_active(self, *, user_id: int) -> list[SavingsGoal]:
        ...

    def create(self, goal: SavingsGoal, *, user_id: int) -> SavingsGoal:
        ...

    def update(self, goal: SavingsGoal, *, user_id: int) -> SavingsGoal:
        ...

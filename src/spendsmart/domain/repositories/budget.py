"""Budget repository protocol."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from ...models.budget import Budget


class BudgetRepository(Protocol):
    """Repository for managing budget entities. Deleted budgets are never returned."""

    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        """Retrieve a non-deleted budget owned by ``user_id``."""
        ...

    def find_active(self, *, user_id: int, category_id: int, month: str) -> Optional[Budget]:
        """Return the active budget for a (user, category, month) key."""
        ...

    def count_active(self, *, user_id: int) -> int:
        """Count active, non-deleted budgets for a user."""
        ...

    def list_active(self, *, user_id: int, limit: int) -> list[Budget]:
        """Most recently created active budgets first."""
        ...

    def upsert(
        self,
        *,
        user_id: int,
        category_id: int,
        month: str,
        limit_amount: Decimal,
        threshold: float,
    ) -> Budget:
        """Create or overwrite-and-reactivate the budget for the key."""
        ...

    def update(self, budget: Budget, *, user_id: int) -> Budget:
        """Persist changes to an existing budget."""
        ...

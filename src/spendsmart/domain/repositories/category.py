"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Lookup and seeding access to the shared category registry."""

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Category]:
        """Retrieve a category by its unique name."""
        ...

    def list_all(self, *, applies_to: Optional[str] = None) -> list[Category]:
        """List categories sorted by name."""
        ...

    def count(self) -> int:
        """Number of stored categories."""
        ...

    def create(self, category: Category) -> Category:
        """Create a new category."""
        ...

    def upsert_by_name(self, category: Category) -> tuple[Category, bool]:
        """Insert the category when its name is unknown; returns (row, created)."""
        ...

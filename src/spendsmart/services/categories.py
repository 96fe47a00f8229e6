"""Shared category registry and its default seed set."""

from __future__ import annotations

from typing import Any, Optional

from ..domain.repositories import CategoryRepository
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.category import CATEGORY_TYPES, EXPENSE, INCOME, Category

logger = get_logger("categories")

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Food", EXPENSE),
    ("Entertainment", EXPENSE),
    ("Dining Out", EXPENSE),
    ("Housing", EXPENSE),
    ("Transportation", EXPENSE),
    ("Health", EXPENSE),
    ("Education", EXPENSE),
    ("Other", EXPENSE),
    ("Salary", INCOME),
    ("Freelance", INCOME),
    ("Investments", INCOME),
    ("Sales", INCOME),
    ("Other Income", INCOME),
)


def seed_categories(repository: CategoryRepository, *, only_if_empty: bool = True) -> int:
    """Insert the default categories and return how many rows were created.

    With ``only_if_empty`` nothing happens once any category exists; otherwise
    missing defaults are added and existing names are left alone.
    """

    if only_if_empty and repository.count() > 0:
        logger.debug("Category seed skipped: registry is not empty")
        return 0

    created = 0
    for name, applies_to in DEFAULT_CATEGORIES:
        _, inserted = repository.upsert_by_name(Category(name=name, applies_to=applies_to))
        created += int(inserted)
    logger.info("Default categories seeded", extra={"created_count": created})
    return created


def list_categories(
    repository: CategoryRepository, applies_to: Optional[str] = None
) -> list[Category]:
    if applies_to is not None and applies_to not in CATEGORY_TYPES:
        raise ValidationError({"type": ["Type must be income or expense."]})
    return repository.list_all(applies_to=applies_to)


def resolve_category(repository: CategoryRepository, category_id: int) -> Category:
    category = repository.get_by_id(category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def serialize_category(category: Category) -> dict[str, Any]:
    return {"_id": category.id, "name": category.name, "type": category.applies_to}

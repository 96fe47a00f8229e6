"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from ...models.category import Category
from ..database import SessionFactory


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        with self.session_factory() as session:
            obj = session.get(Category, category_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str) -> Optional[Category]:
        with self.session_factory() as session:
            obj = session.exec(select(Category).where(Category.name == name)).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, applies_to: Optional[str] = None) -> list[Category]:
        """List categories, optionally filtered by type (income/expense)."""
        with self.session_factory() as session:
            statement = select(Category)
            if applies_to:
                statement = statement.where(Category.applies_to == applies_to)
            statement = statement.order_by(Category.name)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def count(self) -> int:
        with self.session_factory() as session:
            return int(session.exec(select(func.count()).select_from(Category)).one())

    def create(self, category: Category) -> Category:
        """Create a new category."""
        with self.session_factory() as session:
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def upsert_by_name(self, category: Category) -> tuple[Category, bool]:
        """Insert a category unless one with the same name already exists.

        Existing rows are left untouched; the name is the match key.
        """
        with self.session_factory() as session:
            existing = session.exec(select(Category).where(Category.name == category.name)).first()
            if existing:
                session.expunge(existing)
                return existing, False

            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category, True

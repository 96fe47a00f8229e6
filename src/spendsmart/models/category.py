"""Category reference data shared by every user."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

INCOME = "income"
EXPENSE = "expense"
CATEGORY_TYPES = (INCOME, EXPENSE)


class Category(SQLModel, table=True):
    """Transaction category used for budgeting and reporting."""

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, unique=True, index=True, max_length=64)
    applies_to: str = Field(default=EXPENSE, nullable=False, max_length=16)

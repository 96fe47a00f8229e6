"""Monthly per-category budget table."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from ..clock import utcnow


class Budget(SQLModel, table=True):
    """Spending limit for one category in one calendar month.

    ``created_at`` is set on insert only; reactivating a budget through the
    upsert keeps the original creation instant, which anchors spend tracking.
    """

    __tablename__: ClassVar[str] = "budget"
    __table_args__ = (
        UniqueConstraint("user_id", "category_id", "month", name="uq_budget_user_category_month"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False)
    month: str = Field(nullable=False, max_length=7)  # YYYY-MM
    limit_amount: Decimal = Field(max_digits=12, decimal_places=2, nullable=False)
    threshold: float = Field(nullable=False)
    is_active: bool = Field(default=True, nullable=False)
    is_deleted: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=DateTime(timezone=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=False)
    )

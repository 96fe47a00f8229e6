"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from ..clock import utcnow


class Transaction(SQLModel, table=True):
    """A single income or expense entry; amounts are always positive."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    type: str = Field(nullable=False, index=True, max_length=16)
    amount: Decimal = Field(max_digits=12, decimal_places=2, nullable=False)
    occurred_at: datetime = Field(
        nullable=False, index=True, sa_type=DateTime(timezone=False)
    )
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    description: str = Field(default="", max_length=250)
    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=DateTime(timezone=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=False)
    )

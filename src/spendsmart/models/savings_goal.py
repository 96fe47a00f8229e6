"""Savings goal table."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from ..clock import utcnow


class SavingsGoal(SQLModel, table=True):
    """A target amount the user saves towards before a due date."""

    __tablename__: ClassVar[str] = "savings_goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=60)
    description: str = Field(default="", max_length=250)
    target_amount: Decimal = Field(max_digits=12, decimal_places=2, nullable=False)
    current_amount: Decimal = Field(
        default=Decimal("0.00"), max_digits=12, decimal_places=2, nullable=False
    )
    due_date: date = Field(nullable=False)
    is_deleted: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=False)
    )

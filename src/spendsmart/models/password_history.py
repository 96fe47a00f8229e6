"""Previous password hashes, consulted when a user picks a new password."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from ..clock import utcnow


class PasswordHistory(SQLModel, table=True):
    __tablename__: ClassVar[str] = "password_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    password_hash: str = Field(nullable=False, max_length=255)
    changed_at: datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=False)
    )

"""User model supporting authentication, profile details and alert preferences."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from ..clock import utcnow


class User(SQLModel, table=True):
    """Application user; the email doubles as the notification address."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(nullable=False, unique=True, index=True, max_length=120)
    full_name: str = Field(nullable=False, max_length=60)
    password_hash: str = Field(nullable=False, max_length=255)
    alerts_enabled: bool = Field(default=True, nullable=False)

    phone_number: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=60, index=True)
    birthdate: Optional[date] = Field(default=None)
    bio: Optional[str] = Field(default=None, max_length=250)

    # argon2 hash of the emailed recovery code; never the code itself
    reset_code_hash: Optional[str] = Field(default=None, max_length=255)
    reset_code_expires: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=False)
    )

    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=False)
    )
    last_login: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))

"""SQLModel implementation of User repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.password_history import PasswordHistory
from ...models.user import User
from ..database import SessionFactory


class SQLModelUserRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.get(User, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_email(self, email: str) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.exec(select(User).where(User.email == email)).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, user: User) -> User:
        with self.session_factory() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def update(self, user: User) -> User:
        with self.session_factory() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def password_history(self, user_id: int) -> list[str]:
        """Hashes the user has used before, newest first."""
        with self.session_factory() as session:
            rows = session.exec(
                select(PasswordHistory)
                .where(PasswordHistory.user_id == user_id)
                .order_by(PasswordHistory.changed_at.desc(), PasswordHistory.id.desc())  # type: ignore
            ).all()
            return [row.password_hash for row in rows]

    def replace_password(self, user: User, password_hash: str) -> User:
        """Archive the current hash and store the new one in a single commit."""
        with self.session_factory() as session:
            session.add(PasswordHistory(user_id=user.id, password_hash=user.password_hash))
            user.password_hash = password_hash
            user.reset_code_hash = None
            user.reset_code_expires = None
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

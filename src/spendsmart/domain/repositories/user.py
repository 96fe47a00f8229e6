"""User repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def create(self, user: User) -> User:
        ...

    def update(self, user: User) -> User:
        ...

    def password_history(self, user_id: int) -> list[str]:
        ...

    def replace_password(self, user: User, password_hash: str) -> User:
        ...

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no DB access code.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    full_name: str
    email: Optional[str] = None
    is_active: bool = True

    def public_view(self) -> dict:
        """User fields safe to return to API clients (no password hash)."""

        return {
            "id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "full_name": self.full_name,
            "email": self.email,
            "is_active": self.is_active,
        }

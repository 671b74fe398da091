"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    email: str
    display_name: str | None
    password: str | None
    provider: str
    created_at: datetime | None
    last_login: datetime | None
    is_active: bool = True

    @property
    def uid(self) -> str:
        """Return the identifier used to scope per-user storage."""

        return str(self.id)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an identity call: ``user`` on success, ``error`` otherwise."""

    user: User | None = None
    error: str | None = None
    access_token: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = ["AuthResult", "User"]

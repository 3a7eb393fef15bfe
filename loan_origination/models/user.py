"""Staff user and authentication session models."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from loan_origination.models.enums import UserRole

if TYPE_CHECKING:
    from loan_origination.access import RolePermissions


@dataclass
class User:
    """Staff member allowed to operate the system."""

    id: str
    username: str
    password_hash: str  # passlib hash, e.g. $pbkdf2-sha256$<rounds>$<salt>$<digest>
    full_name: str
    email: str
    role: UserRole
    active: bool
    created_at: datetime
    last_login: datetime | None = None


@dataclass
class AuthSession:
    """Result of a login or session check."""

    user: User | None = None
    permissions: "RolePermissions | None" = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @classmethod
    def anonymous(cls) -> "AuthSession":
        return cls(user=None, permissions=None)

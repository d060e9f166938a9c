"""Domain entity representing a marketplace account."""

from dataclasses import dataclass
from datetime import datetime

from .role import ROLE_ADMIN, Role


@dataclass
class User:
    """Core attributes describing a marketplace user."""

    id: int | None
    role: Role
    name: str
    email: str | None
    password: str
    verified: bool
    is_active: bool
    deleted: bool
    created_at: datetime | None

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role alias matches ``alias``."""

        return self.role.alias.lower() == alias.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(ROLE_ADMIN)

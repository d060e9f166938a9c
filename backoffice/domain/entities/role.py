"""Domain entity representing a user role."""

from dataclasses import dataclass

ROLE_INDIVIDUAL = "individual"
ROLE_DEALER = "dealer"
ROLE_ADMIN = "admin"


@dataclass
class Role:
    """Core attributes describing a role that can be assigned to a user."""

    id: int
    name: str
    alias: str


__all__ = ["Role", "ROLE_ADMIN", "ROLE_DEALER", "ROLE_INDIVIDUAL"]

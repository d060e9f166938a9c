"""Repository implementations for infrastructure layer."""

from .role_repository import RoleRepository
from .user_repository import UserRepository
from .promotion_repository import PromotionRepository
from .notification_repository import NotificationRepository

__all__ = [
    "RoleRepository",
    "UserRepository",
    "PromotionRepository",
    "NotificationRepository",
]

"""Domain entities exposed by the application."""

from .audience import (
    ADMIN_CHANNEL,
    GLOBAL_CHANNEL,
    PROMOTION_AUDIENCES,
    AudienceKind,
    AudienceMember,
    AudienceSelector,
    ResolvedAudience,
    role_channel,
    role_for_audience,
    user_channel,
)
from .notification import Notification, NotificationDraft, NotificationKind
from .promotion import (
    DiscountType,
    Promotion,
    PromotionStatus,
    format_amount,
    savings_percentage,
)
from .role import ROLE_ADMIN, ROLE_DEALER, ROLE_INDIVIDUAL, Role
from .user import User

__all__ = [
    "ADMIN_CHANNEL",
    "GLOBAL_CHANNEL",
    "PROMOTION_AUDIENCES",
    "AudienceKind",
    "AudienceMember",
    "AudienceSelector",
    "ResolvedAudience",
    "role_channel",
    "role_for_audience",
    "user_channel",
    "Notification",
    "NotificationDraft",
    "NotificationKind",
    "DiscountType",
    "Promotion",
    "PromotionStatus",
    "format_amount",
    "savings_percentage",
    "ROLE_ADMIN",
    "ROLE_DEALER",
    "ROLE_INDIVIDUAL",
    "Role",
    "User",
]

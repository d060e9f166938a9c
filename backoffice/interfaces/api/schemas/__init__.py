from .auth import Token
from .common import Pagination
from .notification import (
    MarkAllReadResponse,
    MyNotificationsResponse,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationRead,
)
from .promotion import (
    ActivePromotionRead,
    PromoCodeApplyRequest,
    PromoCodeApplyResponse,
    PromoCodeValidateRequest,
    PromoCodeValidateResponse,
    PromotionCounters,
    PromotionCreate,
    PromotionListResponse,
    PromotionRead,
    PromotionStatisticsRead,
    PromotionStatsResponse,
    PromotionSummary,
    PromotionUpdate,
    PromotionUsage,
)

__all__ = [
    "Token",
    "Pagination",
    "MarkAllReadResponse",
    "MyNotificationsResponse",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationListResponse",
    "NotificationRead",
    "ActivePromotionRead",
    "PromoCodeApplyRequest",
    "PromoCodeApplyResponse",
    "PromoCodeValidateRequest",
    "PromoCodeValidateResponse",
    "PromotionCounters",
    "PromotionCreate",
    "PromotionListResponse",
    "PromotionRead",
    "PromotionStatisticsRead",
    "PromotionStatsResponse",
    "PromotionSummary",
    "PromotionUpdate",
    "PromotionUsage",
]

"""Promotion management and redemption use cases."""

from .announce_promotion import announce_promotion, promotion_draft
from .create_promotion import create_promotion
from .delete_promotion import delete_promotion
from .get_promotion import get_promotion
from .list_promotions import (
    PromotionPage,
    PromotionStatistics,
    list_active_promotions,
    list_promotions,
)
from .promotion_stats import PromotionStats, get_promotion_stats
from .redeem_promo_code import (
    PromoCodeCheck,
    PromoCodeRedemption,
    apply_promo_code,
    validate_promo_code,
)
from .update_promotion import update_promotion

__all__ = [
    "announce_promotion",
    "promotion_draft",
    "create_promotion",
    "delete_promotion",
    "get_promotion",
    "PromotionPage",
    "PromotionStatistics",
    "list_active_promotions",
    "list_promotions",
    "PromotionStats",
    "get_promotion_stats",
    "PromoCodeCheck",
    "PromoCodeRedemption",
    "apply_promo_code",
    "validate_promo_code",
    "update_promotion",
]

"""Checkout-facing promo code validation and redemption."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from backoffice.domain.entities import Promotion, format_amount, savings_percentage
from backoffice.domain.exceptions import NotFoundError, ValidationError
from backoffice.infrastructure.repositories import PromotionRepository
from backoffice.utils import now_in_app_timezone

from .validators import normalize_promo_code

logger = logging.getLogger(__name__)


@dataclass
class PromoCodeCheck:
    promotion: Promotion
    discount: float


@dataclass
class PromoCodeRedemption:
    promotion: Promotion
    original_amount: float
    discount: float
    final_amount: float
    savings_percentage: float
    used_count: int


def _usable_promotion(
    repository: PromotionRepository, promo_code: str | None, amount: float | None
) -> Promotion:
    code = normalize_promo_code(promo_code)
    promotion = repository.get_by_code(code)
    if promotion is None:
        raise NotFoundError("Invalid promo code.")
    if not promotion.can_be_used(now_in_app_timezone()):
        raise ValidationError("This promo code is no longer valid.")
    if amount and promotion.requires_minimum(amount):
        raise ValidationError(
            f"Minimum purchase amount of ${format_amount(promotion.min_purchase_amount)} required."
        )
    return promotion


def validate_promo_code(
    session: Session, *, promo_code: str | None, amount: float | None = None
) -> PromoCodeCheck:
    """Check whether ``promo_code`` can be redeemed without consuming it.

    The minimum purchase is only enforced when ``amount`` is given.
    """

    promotion = _usable_promotion(PromotionRepository(session), promo_code, amount)
    return PromoCodeCheck(
        promotion=promotion, discount=promotion.calculate_discount(amount or 0)
    )


def apply_promo_code(
    session: Session,
    *,
    promo_code: str | None,
    amount: float | None,
    user_id: int | str | None = None,
) -> PromoCodeRedemption:
    """Redeem ``promo_code`` for a purchase of ``amount``.

    The usage counter is incremented atomically in storage. Eligibility is
    checked beforehand in a separate read, so concurrent redemptions may push
    ``used_count`` past ``usage_limit``.
    """

    code = normalize_promo_code(promo_code)
    if amount is None or amount <= 0:
        raise ValidationError("Valid amount is required.")

    repository = PromotionRepository(session)
    promotion = _usable_promotion(repository, code, amount)
    discount = promotion.calculate_discount(amount)
    used_count = repository.increment_usage(promotion.id)
    final_amount = amount - discount

    logger.info(
        "Promo code %s applied (promotion %s, user %s): amount=%s discount=%s final=%s used=%s",
        promotion.promo_code,
        promotion.id,
        user_id or "anonymous",
        amount,
        discount,
        final_amount,
        used_count,
    )
    return PromoCodeRedemption(
        promotion=promotion,
        original_amount=amount,
        discount=discount,
        final_amount=final_amount,
        savings_percentage=savings_percentage(discount, amount),
        used_count=used_count,
    )


__all__ = [
    "PromoCodeCheck",
    "PromoCodeRedemption",
    "apply_promo_code",
    "validate_promo_code",
]

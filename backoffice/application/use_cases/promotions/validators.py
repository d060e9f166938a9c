"""Validation helpers for promotion use cases."""

from __future__ import annotations

from datetime import datetime

from backoffice.domain.entities import PROMOTION_AUDIENCES, AudienceKind, DiscountType
from backoffice.domain.exceptions import ConflictError, ValidationError
from backoffice.infrastructure.repositories import PromotionRepository
from backoffice.utils import ensure_app_timezone

DUPLICATE_CODE_MESSAGE = "Promo code already exists. Please use a different code."


def normalize_promo_code(raw: str | None) -> str:
    """Return ``raw`` stripped and upper-cased; empty codes are rejected."""

    code = (raw or "").strip().upper()
    if not code:
        raise ValidationError("Promo code is required.")
    return code


def validate_date_range(start_date: datetime, end_date: datetime) -> None:
    if ensure_app_timezone(start_date) >= ensure_app_timezone(end_date):
        raise ValidationError("End date must be after start date.")


def validate_discount(discount_type: DiscountType, discount_value: float) -> None:
    if discount_type is DiscountType.PERCENTAGE:
        if discount_value < 0 or discount_value > 100:
            raise ValidationError("Percentage discount must be between 0 and 100.")
    elif discount_value < 0:
        raise ValidationError("Fixed discount cannot be negative.")


def validate_usage_limit(usage_limit: int) -> None:
    if usage_limit < 1:
        raise ValidationError("Usage limit must be at least 1.")


def validate_amounts(
    min_purchase_amount: float, max_discount_amount: float | None
) -> None:
    if min_purchase_amount < 0:
        raise ValidationError("Minimum purchase amount cannot be negative.")
    if max_discount_amount is not None and max_discount_amount < 0:
        raise ValidationError("Maximum discount amount cannot be negative.")


def parse_target_audience(raw: str | AudienceKind | None) -> AudienceKind:
    """Return the promotion audience for ``raw``, defaulting to ``all``."""

    if raw is None or raw == "":
        return AudienceKind.ALL
    try:
        kind = AudienceKind(raw)
    except ValueError as exc:
        raise ValidationError(f'Invalid target audience "{raw}".') from exc
    if kind not in PROMOTION_AUDIENCES:
        raise ValidationError(f'Invalid target audience "{raw}".')
    return kind


def ensure_code_available(
    repository: PromotionRepository, promo_code: str, *, exclude_id: int | None = None
) -> None:
    if repository.code_exists(promo_code, exclude_id=exclude_id):
        raise ConflictError(DUPLICATE_CODE_MESSAGE)


__all__ = [
    "DUPLICATE_CODE_MESSAGE",
    "ensure_code_available",
    "normalize_promo_code",
    "parse_target_audience",
    "validate_amounts",
    "validate_date_range",
    "validate_discount",
    "validate_usage_limit",
]

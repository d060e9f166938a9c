"""Use case for updating promotions."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.domain.entities import DiscountType, Promotion, PromotionStatus
from backoffice.domain.exceptions import ConflictError, NotFoundError, ValidationError
from backoffice.infrastructure.repositories import PromotionRepository
from backoffice.utils import ensure_app_timezone, now_in_app_timezone

from .validators import (
    DUPLICATE_CODE_MESSAGE,
    ensure_code_available,
    normalize_promo_code,
    parse_target_audience,
    validate_amounts,
    validate_date_range,
    validate_discount,
    validate_usage_limit,
)

_UNSET: Any = object()


def update_promotion(
    session: Session,
    *,
    promotion_id: int,
    title: str | None = None,
    description: str | None = None,
    promo_code: str | None = None,
    discount_type: DiscountType | None = None,
    discount_value: float | None = None,
    usage_limit: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    target_audience: str | None = None,
    status: PromotionStatus | None = None,
    is_active: bool | None = None,
    min_purchase_amount: float | None = None,
    max_discount_amount: float | None = _UNSET,
) -> Promotion:
    """Apply a partial update to a promotion.

    Omitted fields keep their value. ``max_discount_amount`` may be passed as
    ``None`` to remove the cap. A promotion whose end date already passed is
    stored as expired.
    """

    repository = PromotionRepository(session)
    current = repository.get(promotion_id)
    if current is None:
        raise NotFoundError("Promotion not found.")

    changes: dict[str, Any] = {}
    if title is not None and title.strip():
        changes["title"] = title.strip()
    if description is not None:
        changes["description"] = description
    if promo_code is not None and promo_code.strip():
        code = normalize_promo_code(promo_code)
        if code != current.promo_code:
            ensure_code_available(repository, code, exclude_id=promotion_id)
        changes["promo_code"] = code
    if discount_type is not None:
        changes["discount_type"] = discount_type
    if discount_value is not None:
        changes["discount_value"] = float(discount_value)
    if usage_limit is not None:
        validate_usage_limit(usage_limit)
        changes["usage_limit"] = int(usage_limit)
    if start_date is not None:
        changes["start_date"] = ensure_app_timezone(start_date)
    if end_date is not None:
        changes["end_date"] = ensure_app_timezone(end_date)
    if target_audience is not None:
        changes["target_audience"] = parse_target_audience(target_audience).value
    if status is not None:
        changes["status"] = status
    if is_active is not None:
        changes["is_active"] = is_active
    if min_purchase_amount is not None:
        changes["min_purchase_amount"] = float(min_purchase_amount)
    if max_discount_amount is not _UNSET:
        changes["max_discount_amount"] = max_discount_amount or None

    updated = replace(current, **changes)
    if updated.usage_limit < updated.used_count:
        raise ValidationError(
            f"Usage limit cannot be lower than the current usage count ({updated.used_count})."
        )
    if start_date is not None or end_date is not None:
        validate_date_range(updated.start_date, updated.end_date)
    if discount_type is not None or discount_value is not None:
        validate_discount(updated.discount_type, updated.discount_value)
    validate_amounts(updated.min_purchase_amount, updated.max_discount_amount)

    now = now_in_app_timezone()
    if updated.has_ended(now):
        updated = replace(updated, status=PromotionStatus.EXPIRED)
    updated = replace(updated, updated_at=now)

    try:
        return repository.update(updated)
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_CODE_MESSAGE) from exc


__all__ = ["update_promotion"]

"""Use case for creating promotions."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.application.ports import BroadcastPort, EmailSender
from backoffice.application.use_cases.notifications import FanoutOptions
from backoffice.domain.entities import (
    DiscountType,
    Promotion,
    PromotionStatus,
    User,
)
from backoffice.domain.exceptions import ConflictError, ValidationError
from backoffice.infrastructure.repositories import PromotionRepository
from backoffice.utils import ensure_app_timezone, now_in_app_timezone

from .announce_promotion import announce_promotion
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

logger = logging.getLogger(__name__)


def create_promotion(
    session: Session,
    *,
    title: str | None,
    promo_code: str | None,
    discount_type: DiscountType | None,
    discount_value: float | None,
    usage_limit: int | None,
    start_date: datetime | None,
    end_date: datetime | None,
    description: str | None = None,
    target_audience: str | None = None,
    status: PromotionStatus | None = None,
    min_purchase_amount: float | None = None,
    max_discount_amount: float | None = None,
    created_by: User,
    broadcaster: BroadcastPort | None = None,
    send_email: EmailSender | None = None,
    options: FanoutOptions | None = None,
) -> Promotion:
    """Create a promotion and announce it to its audience.

    Announcement problems are logged; the promotion is created regardless.
    """

    title = (title or "").strip()
    code = (promo_code or "").strip().upper()
    if (
        not title
        or not code
        or discount_type is None
        or discount_value is None
        or usage_limit is None
        or start_date is None
        or end_date is None
    ):
        raise ValidationError("Please provide all required fields.")

    start = ensure_app_timezone(start_date)
    end = ensure_app_timezone(end_date)
    validate_date_range(start, end)
    now = now_in_app_timezone()
    if end < now:
        raise ValidationError("End date cannot be in the past.")
    validate_discount(discount_type, discount_value)
    validate_usage_limit(usage_limit)
    validate_amounts(min_purchase_amount or 0, max_discount_amount)
    audience = parse_target_audience(target_audience)
    code = normalize_promo_code(code)

    repository = PromotionRepository(session)
    ensure_code_available(repository, code)

    entity = Promotion(
        id=None,
        title=title,
        description=description or "",
        promo_code=code,
        discount_type=discount_type,
        discount_value=float(discount_value),
        usage_limit=int(usage_limit),
        used_count=0,
        start_date=start,
        end_date=end,
        target_audience=audience.value,
        status=status or PromotionStatus.ACTIVE,
        is_active=True,
        min_purchase_amount=float(min_purchase_amount or 0),
        max_discount_amount=max_discount_amount or None,
        created_by=created_by.id,
        created_at=now,
    )
    try:
        promotion = repository.create(entity)
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_CODE_MESSAGE) from exc

    logger.info(
        "Promotion %s (%s) created by user %s", promotion.id, promotion.promo_code, created_by.id
    )

    try:
        announce_promotion(
            session,
            promotion,
            admin=created_by,
            broadcaster=broadcaster,
            send_email=send_email,
            options=options or FanoutOptions(),
        )
    except Exception:
        logger.exception("Announcing promotion %s failed", promotion.id)

    return promotion


__all__ = ["create_promotion"]

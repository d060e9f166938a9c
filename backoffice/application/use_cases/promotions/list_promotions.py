"""Use cases listing promotions for admins and shoppers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from backoffice.domain.entities import Promotion
from backoffice.infrastructure.repositories import PromotionRepository
from backoffice.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


@dataclass
class PromotionStatistics:
    total: int
    active: int
    expired: int


@dataclass
class PromotionPage:
    promotions: Sequence[Promotion]
    total: int
    statistics: PromotionStatistics


def list_promotions(
    session: Session,
    *,
    status: str | None = None,
    target_audience: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 10,
) -> PromotionPage:
    """Return a filtered page of promotions plus overall statistics.

    Promotions past their end date are flagged as expired first.
    """

    repository = PromotionRepository(session)
    now = now_in_app_timezone()
    expired = repository.expire_overdue(now)
    if expired:
        logger.info("Marked %s overdue promotions as expired", expired)

    promotions, total = repository.list(
        status=status,
        target_audience=target_audience,
        search=search,
        skip=skip,
        limit=limit,
    )
    statistics = PromotionStatistics(
        total=repository.count_all(),
        active=repository.count_active(now),
        expired=repository.count_expired(now),
    )
    return PromotionPage(promotions=promotions, total=total, statistics=statistics)


def list_active_promotions(session: Session) -> Sequence[Promotion]:
    """Return promotions a shopper can redeem right now, newest first."""

    return PromotionRepository(session).list_active(now_in_app_timezone())


__all__ = [
    "PromotionPage",
    "PromotionStatistics",
    "list_active_promotions",
    "list_promotions",
]

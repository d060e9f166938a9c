"""Use case computing promotion dashboard counters."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from backoffice.infrastructure.repositories import PromotionRepository
from backoffice.utils import now_in_app_timezone, start_of_day


@dataclass
class PromotionStats:
    total: int
    active: int
    expired: int
    today: int
    total_usage: int


def get_promotion_stats(session: Session) -> PromotionStats:
    repository = PromotionRepository(session)
    now = now_in_app_timezone()
    return PromotionStats(
        total=repository.count_all(),
        active=repository.count_active(now),
        expired=repository.count_expired(now),
        today=repository.count_created_since(start_of_day(now)),
        total_usage=repository.total_usage(),
    )


__all__ = ["PromotionStats", "get_promotion_stats"]

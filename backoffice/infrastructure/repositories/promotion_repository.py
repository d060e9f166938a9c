"""Persistence helpers for promotion entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from backoffice.domain.entities import DiscountType, Promotion, PromotionStatus
from backoffice.infrastructure.models import PromotionModel
from backoffice.utils import ensure_app_naive_datetime, ensure_app_timezone


class PromotionRepository:
    """Provide CRUD, statistics and redemption operations for promotions."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, promotion_id: int) -> Promotion | None:
        model = self.session.get(PromotionModel, promotion_id)
        return self._to_entity(model) if model else None

    def get_by_code(self, promo_code: str) -> Promotion | None:
        model = (
            self.session.query(PromotionModel)
            .filter(PromotionModel.promo_code == promo_code)
            .first()
        )
        return self._to_entity(model) if model else None

    def code_exists(self, promo_code: str, *, exclude_id: int | None = None) -> bool:
        query = self.session.query(PromotionModel.id).filter(
            PromotionModel.promo_code == promo_code
        )
        if exclude_id is not None:
            query = query.filter(PromotionModel.id != exclude_id)
        return query.first() is not None

    def create(self, promotion: Promotion) -> Promotion:
        model = PromotionModel()
        self._apply_entity_to_model(model, promotion)
        model.used_count = promotion.used_count
        model.created_by = promotion.created_by
        if promotion.created_at is not None:
            model.created_at = ensure_app_naive_datetime(promotion.created_at)
        self.session.add(model)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, promotion: Promotion) -> Promotion:
        if promotion.id is None:
            raise ValueError("Promotion id is required for updates")
        model = self.session.get(PromotionModel, promotion.id)
        if model is None:
            msg = f"Promotion with id {promotion.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, promotion)
        self.session.add(model)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, promotion_id: int) -> bool:
        model = self.session.get(PromotionModel, promotion_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    def list(
        self,
        *,
        status: str | None = None,
        target_audience: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Promotion], int]:
        query = self.session.query(PromotionModel)
        if status:
            query = query.filter(PromotionModel.status == status)
        if target_audience:
            query = query.filter(PromotionModel.target_audience == target_audience)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(PromotionModel.title).like(pattern),
                    func.lower(PromotionModel.promo_code).like(pattern),
                    func.lower(PromotionModel.description).like(pattern),
                )
            )
        total = query.count()
        models = (
            query.order_by(PromotionModel.created_at.desc(), PromotionModel.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models], total

    def list_active(self, now: datetime) -> Sequence[Promotion]:
        models = (
            self._active_query(now)
            .filter(PromotionModel.is_active.is_(True))
            .order_by(PromotionModel.created_at.desc(), PromotionModel.id.desc())
            .all()
        )
        return [self._to_entity(model) for model in models]

    def count_all(self) -> int:
        return self.session.query(func.count(PromotionModel.id)).scalar() or 0

    def count_active(self, now: datetime) -> int:
        return self._active_query(now).count()

    def count_expired(self, now: datetime) -> int:
        naive_now = ensure_app_naive_datetime(now)
        return (
            self.session.query(PromotionModel)
            .filter(
                or_(
                    PromotionModel.status == PromotionStatus.EXPIRED.value,
                    PromotionModel.end_date < naive_now,
                )
            )
            .count()
        )

    def count_created_since(self, since: datetime) -> int:
        return (
            self.session.query(PromotionModel)
            .filter(PromotionModel.created_at >= ensure_app_naive_datetime(since))
            .count()
        )

    def total_usage(self) -> int:
        total = self.session.query(func.sum(PromotionModel.used_count)).scalar()
        return int(total or 0)

    def increment_usage(self, promotion_id: int) -> int:
        """Atomically add one redemption and return the stored count."""

        self.session.query(PromotionModel).filter(
            PromotionModel.id == promotion_id
        ).update(
            {PromotionModel.used_count: PromotionModel.used_count + 1},
            synchronize_session=False,
        )
        self.session.commit()
        used_count = (
            self.session.query(PromotionModel.used_count)
            .filter(PromotionModel.id == promotion_id)
            .scalar()
        )
        return int(used_count or 0)

    def expire_overdue(self, now: datetime) -> int:
        """Flag promotions whose end date passed as expired."""

        updated = (
            self.session.query(PromotionModel)
            .filter(PromotionModel.end_date < ensure_app_naive_datetime(now))
            .filter(PromotionModel.status != PromotionStatus.EXPIRED.value)
            .update(
                {PromotionModel.status: PromotionStatus.EXPIRED.value},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def _active_query(self, now: datetime) -> Query:
        naive_now = ensure_app_naive_datetime(now)
        return self.session.query(PromotionModel).filter(
            PromotionModel.status == PromotionStatus.ACTIVE.value,
            PromotionModel.start_date <= naive_now,
            PromotionModel.end_date >= naive_now,
            PromotionModel.used_count < PromotionModel.usage_limit,
        )

    @staticmethod
    def _apply_entity_to_model(model: PromotionModel, promotion: Promotion) -> None:
        model.title = promotion.title
        model.description = promotion.description
        model.promo_code = promotion.promo_code
        model.discount_type = promotion.discount_type.value
        model.discount_value = promotion.discount_value
        model.usage_limit = promotion.usage_limit
        model.start_date = ensure_app_naive_datetime(promotion.start_date)
        model.end_date = ensure_app_naive_datetime(promotion.end_date)
        model.target_audience = promotion.target_audience
        model.status = promotion.status.value
        model.is_active = promotion.is_active
        model.min_purchase_amount = promotion.min_purchase_amount
        model.max_discount_amount = promotion.max_discount_amount

    @staticmethod
    def _to_entity(model: PromotionModel) -> Promotion:
        return Promotion(
            id=model.id,
            title=model.title,
            description=model.description or "",
            promo_code=model.promo_code,
            discount_type=DiscountType(model.discount_type),
            discount_value=model.discount_value,
            usage_limit=model.usage_limit,
            used_count=model.used_count or 0,
            start_date=ensure_app_timezone(model.start_date),
            end_date=ensure_app_timezone(model.end_date),
            target_audience=model.target_audience,
            status=PromotionStatus(model.status),
            is_active=model.is_active,
            min_purchase_amount=model.min_purchase_amount or 0,
            max_discount_amount=model.max_discount_amount,
            created_by=model.created_by,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["PromotionRepository"]

"""Schemas for promotion endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from backoffice.domain.entities import DiscountType, PromotionStatus

from .common import Pagination


class PromotionCreate(BaseModel):
    """Payload used to create a promotion.

    Required fields are checked by the use case so missing values produce a
    single business error instead of a field-level validation report.
    """

    title: str | None = None
    description: str | None = None
    promo_code: str | None = None
    discount_type: DiscountType | None = None
    discount_value: float | None = None
    usage_limit: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    target_audience: str | None = None
    status: PromotionStatus | None = None
    min_purchase_amount: float | None = None
    max_discount_amount: float | None = None


class PromotionUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    promo_code: str | None = None
    discount_type: DiscountType | None = None
    discount_value: float | None = None
    usage_limit: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    target_audience: str | None = None
    status: PromotionStatus | None = None
    is_active: bool | None = None
    min_purchase_amount: float | None = None
    max_discount_amount: float | None = None

    model_config = ConfigDict(extra="forbid")


class PromotionRead(BaseModel):
    id: int
    title: str
    description: str
    promo_code: str
    discount_type: DiscountType
    discount_value: float
    usage_limit: int
    used_count: int
    start_date: datetime
    end_date: datetime
    target_audience: str
    status: PromotionStatus
    is_active: bool
    min_purchase_amount: float
    max_discount_amount: float | None
    created_by: int | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class ActivePromotionRead(BaseModel):
    """Public projection of a redeemable promotion."""

    id: int
    title: str
    description: str
    promo_code: str
    discount_type: DiscountType
    discount_value: float
    min_purchase_amount: float
    max_discount_amount: float | None
    start_date: datetime
    end_date: datetime
    usage_limit: int
    used_count: int

    model_config = ConfigDict(from_attributes=True)


class PromotionStatisticsRead(BaseModel):
    total: int
    active: int
    expired: int


class PromotionListResponse(BaseModel):
    promotions: list[PromotionRead]
    statistics: PromotionStatisticsRead
    pagination: Pagination


class PromotionCounters(PromotionStatisticsRead):
    today: int


class PromotionUsage(BaseModel):
    total: int


class PromotionStatsResponse(BaseModel):
    promotions: PromotionCounters
    usage: PromotionUsage


class PromotionSummary(BaseModel):
    id: int
    title: str
    promo_code: str
    discount_type: DiscountType
    discount_value: float
    max_discount_amount: float | None

    model_config = ConfigDict(from_attributes=True)


class PromoCodeValidateRequest(BaseModel):
    promo_code: str | None = None
    amount: float | None = Field(default=None, description="Cart amount used for the minimum check")


class PromoCodeValidateResponse(BaseModel):
    promotion: PromotionSummary
    discount: float


class PromoCodeApplyRequest(BaseModel):
    promo_code: str | None = None
    amount: float | None = None
    user_id: int | str | None = None


class PromoCodeApplyResponse(BaseModel):
    promotion: PromotionSummary
    original_amount: float
    discount: float
    final_amount: float
    savings_percentage: float

"""Domain entity representing a discount promotion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any


class DiscountType(str, Enum):
    """How the discount value of a promotion is interpreted."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PromotionStatus(str, Enum):
    """Lifecycle status stored with a promotion."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


@dataclass
class Promotion:
    """A promo code offering a discount to a target audience."""

    id: int | None
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
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_exhausted(self) -> bool:
        return self.used_count >= self.usage_limit

    def has_ended(self, now: datetime) -> bool:
        return self.end_date < now

    def can_be_used(self, now: datetime) -> bool:
        """Return ``True`` when the code may be redeemed at ``now``."""

        return (
            self.status is PromotionStatus.ACTIVE
            and self.is_active
            and self.start_date <= now <= self.end_date
            and not self.is_exhausted()
        )

    def requires_minimum(self, amount: float) -> bool:
        """Return ``True`` when ``amount`` is below the minimum purchase."""

        return self.min_purchase_amount > 0 and amount < self.min_purchase_amount

    def calculate_discount(self, amount: float) -> float:
        """Return the discount granted on a purchase of ``amount``.

        Fixed discounts are not clamped to ``amount``.
        """

        if self.discount_type is DiscountType.PERCENTAGE:
            discount = amount * self.discount_value / 100
            if self.max_discount_amount is not None and discount > self.max_discount_amount:
                discount = self.max_discount_amount
            return discount
        return self.discount_value

    def discount_label(self) -> str:
        """Short human readable discount, e.g. ``20%`` or ``$15``."""

        if self.discount_type is DiscountType.PERCENTAGE:
            return f"{format_amount(self.discount_value)}%"
        return f"${format_amount(self.discount_value)}"

    def snapshot(self) -> dict[str, Any]:
        """Return the JSON representation embedded in promotion notifications."""

        return {
            "promotion_id": self.id,
            "title": self.title,
            "description": self.description,
            "promo_code": self.promo_code,
            "discount_type": self.discount_type.value,
            "discount_value": self.discount_value,
            "min_purchase_amount": self.min_purchase_amount,
            "max_discount_amount": self.max_discount_amount,
            "usage_limit": self.usage_limit,
            "used_count": self.used_count,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status.value,
            "target_audience": self.target_audience,
        }


def format_amount(value: float) -> str:
    """Render ``value`` without a trailing ``.0`` for whole numbers."""

    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0")


def savings_percentage(discount: float, amount: float) -> float:
    """Return ``discount / amount`` as a percentage rounded half-up to one decimal."""

    ratio = Decimal(discount / amount * 100)
    return float(ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


__all__ = [
    "DiscountType",
    "Promotion",
    "PromotionStatus",
    "format_amount",
    "savings_percentage",
]

"""Tests for discount arithmetic and redeemability on promotions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from backoffice.domain.entities import (
    DiscountType,
    Promotion,
    PromotionStatus,
    format_amount,
    savings_percentage,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _promotion(**overrides) -> Promotion:
    values = dict(
        id=1,
        title="Summer Sale",
        description="",
        promo_code="SUMMER20",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=20,
        usage_limit=100,
        used_count=0,
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=7),
        target_audience="all",
        status=PromotionStatus.ACTIVE,
        is_active=True,
        min_purchase_amount=50,
        max_discount_amount=30,
        created_by=None,
    )
    values.update(overrides)
    return Promotion(**values)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(100, 20), (150, 30), (200, 30), (1000, 30)],
)
def test_percentage_discount_is_capped(amount, expected):
    assert _promotion().calculate_discount(amount) == expected


def test_percentage_discount_without_cap():
    promotion = _promotion(max_discount_amount=None)

    assert promotion.calculate_discount(1000) == 200


def test_fixed_discount_is_not_clamped_to_amount():
    promotion = _promotion(discount_type=DiscountType.FIXED, discount_value=15)

    assert promotion.calculate_discount(10) == 15
    assert promotion.calculate_discount(200) == 15


@pytest.mark.parametrize(
    ("overrides", "usable"),
    [
        ({}, True),
        ({"status": PromotionStatus.EXPIRED}, False),
        ({"is_active": False}, False),
        ({"used_count": 100}, False),
        ({"start_date": NOW + timedelta(hours=1)}, False),
        ({"end_date": NOW - timedelta(seconds=1)}, False),
    ],
)
def test_can_be_used(overrides, usable):
    assert _promotion(**overrides).can_be_used(NOW) is usable


def test_minimum_purchase_only_applies_when_positive():
    assert _promotion().requires_minimum(40) is True
    assert _promotion().requires_minimum(50) is False
    assert _promotion(min_purchase_amount=0).requires_minimum(1) is False


def test_savings_percentage_rounds_half_up():
    assert savings_percentage(30, 200) == 15.0
    assert savings_percentage(1, 3) == 33.3
    assert savings_percentage(1, 16) == 6.3


def test_discount_label_and_amount_format():
    assert _promotion().discount_label() == "20%"
    assert _promotion(discount_type=DiscountType.FIXED, discount_value=15).discount_label() == "$15"
    assert format_amount(12.5) == "12.5"
    assert format_amount(1500000) == "1500000"


def test_snapshot_contains_code_and_iso_dates():
    snapshot = _promotion().snapshot()

    assert snapshot["promo_code"] == "SUMMER20"
    assert snapshot["discount_type"] == "percentage"
    assert snapshot["end_date"] == (NOW + timedelta(days=7)).isoformat()

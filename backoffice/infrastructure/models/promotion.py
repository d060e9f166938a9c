"""SQLAlchemy model for promotions."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text

from backoffice.infrastructure.database import Base
from backoffice.utils import now_in_app_naive_datetime


class PromotionModel(Base):
    """Database representation of a promo code campaign."""

    __tablename__ = "promotion"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(160), nullable=False)
    description = Column(Text, nullable=False, default="")
    promo_code = Column(String(50), nullable=False, unique=True, index=True)
    discount_type = Column(String(20), nullable=False)
    discount_value = Column(Float, nullable=False)
    usage_limit = Column(Integer, nullable=False)
    used_count = Column(Integer, nullable=False, default=0)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False, index=True)
    target_audience = Column(String(20), nullable=False, default="all")
    status = Column(String(20), nullable=False, default="active", index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    min_purchase_amount = Column(Float, nullable=False, default=0)
    max_discount_amount = Column(Float, nullable=True)
    created_by = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)


__all__ = ["PromotionModel"]

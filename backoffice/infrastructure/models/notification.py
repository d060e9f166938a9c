"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import expression

from backoffice.infrastructure.database import Base
from backoffice.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for notifications.

    A ``NULL`` recipient marks a broadcast shared by every user.
    """

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    target_role = Column(String(50), nullable=True)
    kind = Column(String(20), nullable=False, default="info")
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    action_url = Column(String(500), nullable=True)
    action_text = Column(String(120), nullable=True)
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    read_at = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True)
    # ``metadata`` is reserved on declarative classes.
    payload = Column("metadata", JSON, nullable=False, default=dict)
    created_by = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True)


__all__ = ["NotificationModel"]

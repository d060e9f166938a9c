"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from backoffice.infrastructure.database import Base
from backoffice.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of a marketplace account."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    role_id = Column(Integer, ForeignKey("role.id"), nullable=False, index=True)
    name = Column(String(80), nullable=False)
    email = Column(String(120), nullable=True, unique=True, index=True)
    password = Column(String(255), nullable=False)
    verified = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_active = Column(Boolean, nullable=False, default=True)
    deleted = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    role = relationship("RoleModel", lazy="joined")


__all__ = ["UserModel"]

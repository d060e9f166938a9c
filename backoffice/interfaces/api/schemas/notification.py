"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from backoffice.domain.entities import Notification, NotificationKind

from .common import Pagination


class NotificationCreate(BaseModel):
    """Payload used by admins to send a notification.

    ``recipient`` (user id or email) takes precedence over ``target_audience``.
    """

    title: str | None = None
    message: str | None = None
    type: NotificationKind = NotificationKind.INFO
    recipient: int | str | None = None
    target_audience: str | None = None
    action_url: str | None = None
    action_text: str | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    title: str
    message: str
    type: NotificationKind
    recipient_id: int | None
    target_role: str | None = None
    action_url: str | None = None
    action_text: str | None = None
    is_read: bool
    read_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_by: int | None = None
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id or 0,
            title=notification.title,
            message=notification.message,
            type=notification.kind,
            recipient_id=notification.recipient_id,
            target_role=notification.target_role,
            action_url=notification.action_url,
            action_text=notification.action_text,
            is_read=notification.is_read,
            read_at=notification.read_at,
            expires_at=notification.expires_at,
            metadata=notification.metadata or {},
            created_by=notification.created_by,
            created_at=notification.created_at,
        )


class NotificationCreateResponse(BaseModel):
    notification: NotificationRead | None
    count: int
    intended: int
    emails_sent: int


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    pagination: Pagination


class MyNotificationsResponse(NotificationListResponse):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int

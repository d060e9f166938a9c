"""Domain entity representing an in-app notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationKind(str, Enum):
    """Visual category of a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    PROMOTION = "promotion"


@dataclass
class Notification:
    """Message shown in the notification bell.

    ``recipient_id`` set to ``None`` marks a broadcast visible to every user.
    """

    id: int | None
    title: str
    message: str
    kind: NotificationKind
    recipient_id: int | None
    target_role: str | None = None
    action_url: str | None = None
    action_text: str | None = None
    is_read: bool = False
    read_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_by: int | None = None
    created_at: datetime | None = None

    @property
    def is_broadcast(self) -> bool:
        return self.recipient_id is None

    def is_visible_to(self, user_id: int) -> bool:
        return self.recipient_id is None or self.recipient_id == user_id


@dataclass
class NotificationDraft:
    """Source event describing a notification before it is fanned out."""

    title: str
    message: str
    kind: NotificationKind = NotificationKind.INFO
    action_url: str | None = None
    action_text: str | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_by: int | None = None

    def build(
        self,
        *,
        recipient_id: int | None,
        target_role: str | None,
        created_at: datetime,
    ) -> Notification:
        """Return an unsaved :class:`Notification` addressed to ``recipient_id``."""

        return Notification(
            id=None,
            title=self.title,
            message=self.message,
            kind=self.kind,
            recipient_id=recipient_id,
            target_role=target_role,
            action_url=self.action_url,
            action_text=self.action_text,
            expires_at=self.expires_at,
            metadata=dict(self.metadata),
            created_by=self.created_by,
            created_at=created_at,
        )


__all__ = ["Notification", "NotificationDraft", "NotificationKind"]

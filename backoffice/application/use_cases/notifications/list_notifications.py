"""Use cases for reading notifications."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from backoffice.domain.entities import Notification, User
from backoffice.infrastructure.repositories import NotificationRepository


@dataclass
class NotificationPage:
    notifications: Sequence[Notification]
    total: int
    unread_count: int | None = None


def list_notifications(
    session: Session,
    *,
    kind: str | None = None,
    recipient_id: int | None = None,
    is_read: bool | None = None,
    skip: int = 0,
    limit: int = 20,
) -> NotificationPage:
    """Return every notification matching the admin filters."""

    notifications, total = NotificationRepository(session).list(
        kind=kind, recipient_id=recipient_id, is_read=is_read, skip=skip, limit=limit
    )
    return NotificationPage(notifications=notifications, total=total)


def list_user_notifications(
    session: Session,
    *,
    user: User,
    is_read: bool | None = None,
    skip: int = 0,
    limit: int = 20,
) -> NotificationPage:
    """Return personal and broadcast notifications for ``user``."""

    repository = NotificationRepository(session)
    notifications, total = repository.list_for_user(
        user.id, is_read=is_read, skip=skip, limit=limit
    )
    return NotificationPage(
        notifications=notifications,
        total=total,
        unread_count=repository.count_unread_for_user(user.id),
    )


__all__ = ["NotificationPage", "list_notifications", "list_user_notifications"]

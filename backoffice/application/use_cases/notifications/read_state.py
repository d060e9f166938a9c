"""Read-state operations backing the notification bell."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from backoffice.domain.entities import Notification, User
from backoffice.domain.exceptions import NotFoundError, PermissionDeniedError
from backoffice.infrastructure.repositories import NotificationRepository
from backoffice.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def mark_notification_read(
    session: Session, notification_id: int, *, user: User
) -> Notification:
    """Mark one notification visible to ``user`` as read.

    Broadcast records are shared, so reading one marks it read for everybody.
    Re-reading keeps the original ``read_at``.
    """

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found.")
    if not notification.is_visible_to(user.id):
        raise PermissionDeniedError("You don't have access to this notification.")
    return repository.mark_read(notification_id, read_at=now_in_app_timezone())


def mark_all_notifications_read(session: Session, *, user: User) -> int:
    """Flip every unread personal and broadcast notification for ``user``."""

    updated = NotificationRepository(session).mark_all_read(
        user.id, read_at=now_in_app_timezone()
    )
    logger.info("User %s marked %s notifications as read", user.id, updated)
    return updated


def count_unread_notifications(session: Session, *, user: User) -> int:
    return NotificationRepository(session).count_unread_for_user(user.id)


__all__ = [
    "count_unread_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]

"""Use case for deleting notifications."""

from sqlalchemy.orm import Session

from backoffice.domain.exceptions import NotFoundError
from backoffice.infrastructure.repositories import NotificationRepository


def delete_notification(session: Session, notification_id: int) -> None:
    """Delete the notification identified by ``notification_id``."""

    if not NotificationRepository(session).delete(notification_id):
        raise NotFoundError("Notification not found.")

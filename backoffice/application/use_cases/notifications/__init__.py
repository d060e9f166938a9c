"""Notification fan-out pipeline and read-state use cases."""

from .broadcast import NEW_NOTIFICATION_EVENT, RealtimeBroadcast, serialize_notification
from .create_notification import create_notification
from .delete_notification import delete_notification
from .email_dispatch import EmailDispatch, build_email_renderer
from .fanout import FanoutResult, NotificationFanout
from .list_notifications import (
    NotificationPage,
    list_notifications,
    list_user_notifications,
)
from .options import FanoutOptions
from .pipeline import DeliveryReport, deliver_notification
from .read_state import (
    count_unread_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "NEW_NOTIFICATION_EVENT",
    "RealtimeBroadcast",
    "serialize_notification",
    "create_notification",
    "delete_notification",
    "EmailDispatch",
    "build_email_renderer",
    "FanoutResult",
    "NotificationFanout",
    "NotificationPage",
    "list_notifications",
    "list_user_notifications",
    "FanoutOptions",
    "DeliveryReport",
    "deliver_notification",
    "count_unread_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]

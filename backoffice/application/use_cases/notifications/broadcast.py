"""Realtime leg of a fan-out."""

from __future__ import annotations

import logging
from typing import Any

from backoffice.application.ports import BroadcastPort
from backoffice.domain.entities import (
    ADMIN_CHANNEL,
    Notification,
    NotificationKind,
    ResolvedAudience,
)

from .fanout import FanoutResult

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "new-notification"


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the compact projection pushed to websocket clients."""

    payload: dict[str, Any] = {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.kind.value,
        "action_url": notification.action_url,
        "action_text": notification.action_text,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }
    if notification.kind is NotificationKind.PROMOTION:
        payload["metadata"] = dict(notification.metadata or {})
    return payload


class RealtimeBroadcast:
    """Emit ``new-notification`` on the channel matching the audience.

    A missing broadcaster or a failing emit is logged and skipped.
    """

    def __init__(self, broadcaster: BroadcastPort | None) -> None:
        self._broadcaster = broadcaster

    def announce(self, audience: ResolvedAudience, result: FanoutResult) -> int:
        """Emit the fan-out outcome and return the number of emits attempted."""

        if self._broadcaster is None:
            logger.warning(
                "Realtime layer not initialised; skipping broadcast for %s",
                audience.selector.describe(),
            )
            return 0
        first = result.first
        if first is None:
            return 0

        payload = serialize_notification(first)
        emitted = 0
        if self._emit(audience.channel, payload):
            emitted += 1

        admin_payload = dict(payload)
        admin_payload["total_recipients"] = "all" if audience.broadcast else result.count
        if self._emit(ADMIN_CHANNEL, admin_payload):
            emitted += 1
        return emitted

    def _emit(self, channel: str, payload: dict[str, Any]) -> bool:
        try:
            self._broadcaster.emit(channel, NEW_NOTIFICATION_EVENT, payload)
        except Exception:
            logger.exception("Realtime emit on channel %s failed", channel)
            return False
        return True


__all__ = ["NEW_NOTIFICATION_EVENT", "RealtimeBroadcast", "serialize_notification"]

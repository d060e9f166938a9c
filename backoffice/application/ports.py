"""Interfaces the fan-out pipeline depends on.

Concrete adapters live in ``backoffice.infrastructure`` and are injected by
the API layer, which keeps the pipeline testable with fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from backoffice.domain.entities import Notification


class BroadcastPort(Protocol):
    """Push a realtime event to every live connection on ``channel``."""

    def emit(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        ...


class EmailSender(Protocol):
    """Submit one email; ``True`` means the transport accepted it."""

    def __call__(self, subject: str, html_content: str, recipient: str) -> bool:
        ...


class NotificationWriter(Protocol):
    """Subset of the notification repository used by the fan-out engine."""

    def create(self, notification: Notification) -> Notification:
        ...

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        ...


__all__ = ["BroadcastPort", "EmailSender", "NotificationWriter"]

"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Iterable, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Manage active websocket connections grouped by channel key."""

    def __init__(self) -> None:
        self._channels: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, channels: Iterable[str]) -> None:
        """Accept the websocket connection and subscribe it to ``channels``."""

        await websocket.accept()
        self.subscribe(websocket, channels)

    def subscribe(self, websocket: WebSocket, channels: Iterable[str]) -> None:
        for channel in channels:
            self._channels[channel].add(websocket)

    def disconnect(self, websocket: WebSocket, channels: Iterable[str] | None = None) -> None:
        """Remove ``websocket`` from ``channels`` (every channel when omitted)."""

        keys = list(channels) if channels is not None else list(self._channels)
        for channel in keys:
            connections = self._channels.get(channel)
            if connections is None:
                continue
            connections.discard(websocket)
            if not connections:
                self._channels.pop(channel, None)

    def connection_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    async def send_to_channel(self, channel: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every connection subscribed to ``channel``."""

        delivered = 0
        for connection in list(self._channels.get(channel, set())):
            try:
                await connection.send_json(message)
            except Exception:  # pragma: no cover - socket closed mid-send
                logger.warning("Dropping dead websocket on channel %s", channel)
                self.disconnect(connection)
            else:
                delivered += 1
        return delivered


__all__ = ["NotificationConnectionManager"]

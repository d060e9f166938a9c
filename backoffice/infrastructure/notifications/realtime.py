"""Websocket implementation of the realtime broadcast port."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from anyio import from_thread

from .manager import NotificationConnectionManager

logger = logging.getLogger(__name__)


class WebsocketBroadcaster:
    """Deliver ``{"type": event, "data": payload}`` messages to a channel."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def emit(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        message = {"type": event, "data": copy.deepcopy(payload)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Sync route handlers run in anyio worker threads.
            from_thread.run(self._manager.send_to_channel, channel, message)
        else:
            loop.create_task(self._manager.send_to_channel(channel, message))
        logger.debug("Scheduled %s event on channel %s", event, channel)


__all__ = ["WebsocketBroadcaster"]

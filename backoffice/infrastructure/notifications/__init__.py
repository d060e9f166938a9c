"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager
from .realtime import WebsocketBroadcaster

__all__ = ["NotificationConnectionManager", "WebsocketBroadcaster"]

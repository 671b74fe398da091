"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager
from .publisher import (
    NotificationPublisher,
    deserialize_notification,
    serialize_notification,
)

__all__ = [
    "NotificationConnectionManager",
    "NotificationPublisher",
    "deserialize_notification",
    "serialize_notification",
]

"""Utility helpers to push registry broadcasts to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from anyio import from_thread

from app.domain.entities import (
    NotificationRecord,
    NotificationType,
    ToastEvent,
    default_icon_for,
)
from app.utils import parse_iso_datetime

from .manager import NotificationConnectionManager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize registry state and schedule its delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def publish_notifications(
        self, scope: str, notifications: Sequence[NotificationRecord]
    ) -> None:
        """Schedule the full ``notifications`` list for connections of ``scope``."""

        message = {
            "type": "notifications",
            "data": [serialize_notification(record) for record in notifications],
        }
        self._schedule_send(scope, message)

    def publish_toast(self, scope: str, event: ToastEvent) -> None:
        """Schedule a transient toast display event for ``scope``."""

        message = {
            "type": "toast",
            "data": {
                **serialize_notification(event.record),
                "duration_ms": event.duration_ms,
            },
        }
        self._schedule_send(scope, message)

    def _schedule_send(self, scope: str, message: dict[str, Any]) -> None:
        if not self._manager.connection_count(scope):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_scope, scope, message)
            except RuntimeError:
                logger.debug("No event loop available; dropping %s message", message["type"])
        else:
            loop.create_task(self._manager.send_to_scope(scope, message))


def serialize_notification(record: NotificationRecord) -> dict[str, Any]:
    """Return the JSON representation shared by storage and websockets."""

    return {
        "id": record.id,
        "type": record.type.value,
        "category": record.category,
        "title": record.title,
        "message": record.message,
        "icon": record.icon,
        "timestamp": record.timestamp.isoformat(),
        "read": record.read,
        "key": record.key,
        "data": record.data,
    }


def deserialize_notification(payload: Mapping[str, Any]) -> NotificationRecord:
    """Rebuild a :class:`NotificationRecord` from :func:`serialize_notification` output."""

    timestamp = parse_iso_datetime(payload.get("timestamp"))
    if timestamp is None:
        raise ValueError("Stored notification has no timestamp")
    category = str(payload.get("category") or "system")
    return NotificationRecord(
        id=int(payload["id"]),
        type=NotificationType(payload["type"]),
        category=category,
        title=str(payload.get("title", "")),
        message=str(payload.get("message", "")),
        icon=payload.get("icon") or default_icon_for(category),
        timestamp=timestamp,
        read=bool(payload.get("read", False)),
        key=payload.get("key"),
        data=payload.get("data"),
    )


__all__ = [
    "NotificationPublisher",
    "deserialize_notification",
    "serialize_notification",
]

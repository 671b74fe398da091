"""In-process registry holding the notifications of the active user."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import Any, Protocol

from app.domain.entities import (
    NotificationRecord,
    NotificationRequest,
    NotificationType,
    ToastEvent,
    default_icon_for,
)
from app.infrastructure.notifications import (
    deserialize_notification,
    serialize_notification,
)
from app.utils import utc_now

logger = logging.getLogger(__name__)

GUEST_SCOPE = "guest"
STORAGE_KEY_PREFIX = "notifications:"
DEFAULT_TOAST_DURATION_MS = 5000

Subscriber = Callable[[list[NotificationRecord]], None]
ToastListener = Callable[[ToastEvent], None]
PermissionRequester = Callable[[], Awaitable[bool]]


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class InvalidNotificationError(ValueError):
    """Raised when a notification request lacks one of its required fields."""


class NotificationRegistry:
    """Ordered, per-user list of notifications with subscriber fan-out.

    Records are kept newest-first in insertion order. Every mutation writes
    the whole list to ``storage`` under the active scope and then calls each
    subscriber with the current list. Toast requests never enter the list;
    they are handed to the toast listeners instead.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        toast_duration_ms: int = DEFAULT_TOAST_DURATION_MS,
        permission_requester: PermissionRequester | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._storage = storage
        self._toast_duration_ms = toast_duration_ms
        self._permission_requester = permission_requester
        self._clock = clock
        self._subscribers: dict[object, Subscriber] = {}
        self._toast_listeners: dict[object, ToastListener] = {}
        self._last_id = 0
        self._scope = GUEST_SCOPE
        self._notifications: list[NotificationRecord] = self._load()

    @property
    def scope(self) -> str:
        return self._scope

    def set_user(self, user_id: str | int | None) -> None:
        """Switch to the scope of ``user_id`` (guest when empty) and reload its list."""

        self._scope = str(user_id) if user_id not in (None, "") else GUEST_SCOPE
        self._notifications = self._load()
        self._broadcast()

    def clear(self) -> None:
        self._notifications = []
        self._broadcast()

    def add_notification(
        self, request: NotificationRequest | Mapping[str, Any]
    ) -> NotificationRecord | None:
        """Insert a notification unless an identical keyed one is already held.

        Returns the stored record, or ``None`` when the request was suppressed
        as a duplicate or was a toast.
        """

        if isinstance(request, Mapping):
            request = _request_from_mapping(request)
        notification_type = _validate(request)

        if request.key and self._is_duplicate(request):
            logger.debug("Duplicate notification suppressed for key %s", request.key)
            return None

        category = str(getattr(request.category, "value", request.category))
        record = NotificationRecord(
            id=self._next_id(),
            type=notification_type,
            category=category,
            title=request.title,
            message=request.message,
            icon=request.icon or default_icon_for(category),
            timestamp=self._clock(),
            read=False,
            key=request.key,
            data=request.data,
        )

        if record.is_durable():
            self._notifications.insert(0, record)
            self._broadcast()
            return record

        self._show_toast(ToastEvent(record=record, duration_ms=self._toast_duration_ms))
        return None

    def get_notifications(self) -> list[NotificationRecord]:
        return list(self._notifications)

    def get_notifications_by_category(self, category: str) -> list[NotificationRecord]:
        category = str(getattr(category, "value", category))
        return [record for record in self._notifications if record.category == category]

    def unread_count(self) -> int:
        return sum(1 for record in self._notifications if not record.read)

    def mark_as_read(self, notification_id: int) -> bool:
        """Flag the record ``notification_id`` as read; ``False`` when nothing changed."""

        for record in self._notifications:
            if record.id == notification_id:
                if record.read:
                    return False
                record.read = True
                self._broadcast()
                return True
        return False

    def mark_all_as_read(self) -> None:
        for record in self._notifications:
            record.read = True
        self._broadcast()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for every broadcast and return its unsubscribe handle."""

        token = object()
        self._subscribers[token] = callback

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def subscribe_toasts(self, callback: ToastListener) -> Callable[[], None]:
        token = object()
        self._toast_listeners[token] = callback

        def unsubscribe() -> None:
            self._toast_listeners.pop(token, None)

        return unsubscribe

    async def request_push_permission(self) -> bool:
        """Ask the platform for push permission; errors resolve to ``False``."""

        if self._permission_requester is None:
            return False
        try:
            return bool(await self._permission_requester())
        except Exception as exc:
            logger.error("Error requesting notification permission: %s", exc)
            return False

    def _is_duplicate(self, request: NotificationRequest) -> bool:
        return any(
            record.key == request.key
            and record.title == request.title
            and record.message == request.message
            for record in self._notifications
        )

    def _next_id(self) -> int:
        candidate = int(self._clock().timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def _storage_key(self) -> str:
        return f"{STORAGE_KEY_PREFIX}{self._scope}"

    def _load(self) -> list[NotificationRecord]:
        try:
            raw = self._storage.get_item(self._storage_key())
        except Exception as exc:
            logger.warning("Could not read notifications for %s: %s", self._scope, exc)
            return []
        if not raw:
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise TypeError(f"expected a list, got {type(payload).__name__}")
            records = [deserialize_notification(item) for item in payload]
        except (AttributeError, TypeError, ValueError, KeyError) as exc:
            logger.warning("Discarding unreadable notifications for %s: %s", self._scope, exc)
            return []
        if records:
            self._last_id = max(self._last_id, max(record.id for record in records))
        return records

    def _persist(self) -> None:
        try:
            payload = json.dumps(
                [serialize_notification(record) for record in self._notifications],
                ensure_ascii=False,
                default=str,
            )
            self._storage.set_item(self._storage_key(), payload)
        except Exception as exc:
            logger.warning("Could not persist notifications for %s: %s", self._scope, exc)

    def _broadcast(self) -> None:
        self._persist()
        snapshot = list(self._notifications)
        for callback in list(self._subscribers.values()):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Notification subscriber failed")

    def _show_toast(self, event: ToastEvent) -> None:
        logger.info("Toast: %s", event.record.message)
        for listener in list(self._toast_listeners.values()):
            try:
                listener(event)
            except Exception:
                logger.exception("Toast listener failed")


def _request_from_mapping(payload: Mapping[str, Any]) -> NotificationRequest:
    missing = [name for name in ("type", "category", "title", "message") if name not in payload]
    if missing:
        raise InvalidNotificationError(f"Notification is missing: {', '.join(missing)}")
    return NotificationRequest(
        type=payload["type"],
        category=payload["category"],
        title=payload["title"],
        message=payload["message"],
        icon=payload.get("icon"),
        key=payload.get("key"),
        data=payload.get("data"),
    )


def _validate(request: NotificationRequest) -> NotificationType:
    try:
        notification_type = NotificationType(request.type)
    except ValueError as exc:
        raise InvalidNotificationError(f"Unknown notification type: {request.type!r}") from exc
    if not request.category:
        raise InvalidNotificationError("Notification category is required")
    if not isinstance(request.title, str) or not request.title:
        raise InvalidNotificationError("Notification title is required")
    if not isinstance(request.message, str) or not request.message:
        raise InvalidNotificationError("Notification message is required")
    return notification_type


__all__ = [
    "DEFAULT_TOAST_DURATION_MS",
    "GUEST_SCOPE",
    "InvalidNotificationError",
    "KeyValueStorage",
    "NotificationRegistry",
    "STORAGE_KEY_PREFIX",
]

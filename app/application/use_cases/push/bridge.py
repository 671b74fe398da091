"""Forward push deliveries into the notification registry."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from app.application.use_cases.notifications import NotificationRegistry
from app.domain.entities import (
    NotificationCategory,
    NotificationRecord,
    NotificationRequest,
    NotificationType,
    PushMessage,
)

logger = logging.getLogger(__name__)

DEFAULT_PUSH_ICON = "🔔"


class PushChannel(Protocol):
    async def get_token(self) -> str | None: ...

    def on_message(self, handler: Callable[[PushMessage], None]) -> Callable[[], None]: ...


class PushBridge:
    """Register for push delivery once per session and relay messages."""

    def __init__(self, registry: NotificationRegistry, channel: PushChannel) -> None:
        self._registry = registry
        self._channel = channel
        self.token: str | None = None
        self.initialized = False
        self._unsubscribe: Callable[[], None] | None = None

    async def init(self) -> bool:
        """Request permission, fetch the token and listen; ``True`` once active."""

        if self.initialized:
            return True

        granted = await self._registry.request_push_permission()
        if not granted:
            logger.info("Push notification permission not granted")
            return False

        await self.update_token()
        self.setup_message_listener()
        self.initialized = True
        return True

    async def update_token(self) -> str | None:
        try:
            token = await self._channel.get_token()
        except Exception as exc:
            logger.error("Error getting push token: %s", exc)
            return None

        if not token:
            logger.info("No registration token available")
            return None

        self.token = token
        await self.send_token_to_server(token)
        return token

    async def send_token_to_server(self, token: str) -> None:
        logger.info("Push token ready for delivery backend: %s...", token[:12])

    def setup_message_listener(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._channel.on_message(self.handle_message)

    def handle_message(self, message: PushMessage) -> NotificationRecord | None:
        return self._registry.add_notification(
            NotificationRequest(
                type=NotificationType.PUSH,
                category=message.category or NotificationCategory.SYSTEM,
                title=message.title,
                message=message.body,
                icon=message.icon or DEFAULT_PUSH_ICON,
                data=dict(message.data),
            )
        )

    def shutdown(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.initialized = False
        self.token = None


__all__ = ["DEFAULT_PUSH_ICON", "PushBridge"]

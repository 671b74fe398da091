"""Web push channel: VAPID configuration, device tokens and delivered messages."""

from __future__ import annotations

import logging
import re
from typing import Callable

from app.domain.entities import PushMessage

logger = logging.getLogger(__name__)

MIN_VAPID_KEY_LENGTH = 50

MessageHandler = Callable[[PushMessage], None]


def sanitize_vapid_key(value: str | None) -> str | None:
    """Normalise a pasted VAPID public key into unpadded base64url."""

    if not value:
        return value
    key = str(value).strip()
    if len(key) >= 2 and key[0] == key[-1] and key[0] in ("'", '"'):
        key = key[1:-1]
    key = re.sub(r"\s+", "", key)
    key = key.replace("+", "-").replace("/", "_")
    return key.rstrip("=")


class PushConfigurationError(RuntimeError):
    """Raised when the VAPID key is missing or malformed."""


class WebPushChannel:
    """Push delivery endpoint shared by the device and the push bridge.

    The device registers the token issued by its push service and forwards
    foreground messages; the bridge reads the token and listens for messages.
    """

    def __init__(self, vapid_key: str | None) -> None:
        self._vapid_key = sanitize_vapid_key(vapid_key)
        self._device_token: str | None = None
        self._permission_denied = False
        self._handlers: dict[object, MessageHandler] = {}

    @property
    def vapid_key(self) -> str | None:
        return self._vapid_key

    def is_configured(self) -> bool:
        return bool(self._vapid_key) and len(self._vapid_key) >= MIN_VAPID_KEY_LENGTH

    async def request_permission(self) -> bool:
        if self._permission_denied:
            return False
        return self.is_configured()

    def report_permission(self, granted: bool) -> None:
        self._permission_denied = not granted

    def register_device_token(self, token: str) -> None:
        self._device_token = token.strip() or None
        self._permission_denied = False

    async def get_token(self) -> str | None:
        if not self.is_configured():
            raise PushConfigurationError(
                "Missing or invalid FIREBASE_VAPID_KEY. Set the Web Push certificate "
                "public key from the Cloud Messaging web configuration."
            )
        return self._device_token

    def on_message(self, handler: MessageHandler) -> Callable[[], None]:
        token = object()
        self._handlers[token] = handler

        def unsubscribe() -> None:
            self._handlers.pop(token, None)

        return unsubscribe

    def deliver(self, message: PushMessage) -> int:
        """Hand ``message`` to every listener and return how many received it."""

        logger.info("Push message received: %s", message.title)
        handlers = list(self._handlers.values())
        for handler in handlers:
            try:
                handler(message)
            except Exception:
                logger.exception("Push message handler failed")
        return len(handlers)


__all__ = [
    "MIN_VAPID_KEY_LENGTH",
    "PushConfigurationError",
    "WebPushChannel",
    "sanitize_vapid_key",
]

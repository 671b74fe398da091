"""Domain entities describing notifications shown to the active user."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Delivery channel of a notification."""

    TOAST = "toast"
    IN_APP = "in-app"
    PUSH = "push"


class NotificationCategory(str, Enum):
    """Well known notification categories; other strings are accepted too."""

    PLANT = "plant"
    WEATHER = "weather"
    SYSTEM = "system"


DEFAULT_CATEGORY_ICONS: dict[str, str] = {
    NotificationCategory.PLANT.value: "🌿",
    NotificationCategory.WEATHER.value: "🌤️",
    NotificationCategory.SYSTEM.value: "🔔",
}
FALLBACK_ICON = "🔔"


def default_icon_for(category: str) -> str:
    """Return the glyph used when a notification does not provide one."""

    return DEFAULT_CATEGORY_ICONS.get(str(category), FALLBACK_ICON)


@dataclass(frozen=True)
class NotificationRequest:
    """Caller supplied fields used to build a :class:`NotificationRecord`."""

    type: NotificationType | str
    category: NotificationCategory | str
    title: str
    message: str
    icon: str | None = None
    key: str | None = None
    data: Any = None


@dataclass
class NotificationRecord:
    """Notification stored by the registry.

    Only ``read`` changes after creation.
    """

    id: int
    type: NotificationType
    category: str
    title: str
    message: str
    timestamp: datetime
    icon: str
    read: bool = False
    key: str | None = None
    data: Any = None

    def is_durable(self) -> bool:
        """Return ``True`` when the record belongs in the stored list."""

        return self.type in (NotificationType.IN_APP, NotificationType.PUSH)


@dataclass(frozen=True)
class ToastEvent:
    """Transient display event fired for toast notifications."""

    record: NotificationRecord
    duration_ms: int


@dataclass
class PushMessage:
    """Payload delivered by the push channel."""

    title: str
    body: str
    icon: str | None = None
    category: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "DEFAULT_CATEGORY_ICONS",
    "FALLBACK_ICON",
    "NotificationCategory",
    "NotificationRecord",
    "NotificationRequest",
    "NotificationType",
    "PushMessage",
    "ToastEvent",
    "default_icon_for",
]

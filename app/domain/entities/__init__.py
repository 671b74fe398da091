"""Domain entities exposed by the application."""

from .capture import CapturedImage
from .chat import ChatRole, ChatTurn
from .notification import (
    DEFAULT_CATEGORY_ICONS,
    FALLBACK_ICON,
    NotificationCategory,
    NotificationRecord,
    NotificationRequest,
    NotificationType,
    PushMessage,
    ToastEvent,
    default_icon_for,
)
from .plant import CareGuide, Favorite, PlantInfo
from .user import AuthResult, User
from .weather import Coordinates, WeatherHistoryEntry, WeatherSnapshot

__all__ = [
    "AuthResult",
    "CapturedImage",
    "CareGuide",
    "ChatRole",
    "ChatTurn",
    "Coordinates",
    "DEFAULT_CATEGORY_ICONS",
    "FALLBACK_ICON",
    "Favorite",
    "NotificationCategory",
    "NotificationRecord",
    "NotificationRequest",
    "NotificationType",
    "PlantInfo",
    "PushMessage",
    "ToastEvent",
    "User",
    "WeatherHistoryEntry",
    "WeatherSnapshot",
    "default_icon_for",
]

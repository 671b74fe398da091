"""Notification registry and the helpers that feed it."""

from .events import (
    build_weather_message,
    notify_plant_saved,
    notify_toast,
    notify_weather_update,
    replay_weather_entry,
)
from .registry import (
    GUEST_SCOPE,
    InvalidNotificationError,
    NotificationRegistry,
)

__all__ = [
    "GUEST_SCOPE",
    "InvalidNotificationError",
    "NotificationRegistry",
    "build_weather_message",
    "notify_plant_saved",
    "notify_toast",
    "notify_weather_update",
    "replay_weather_entry",
]

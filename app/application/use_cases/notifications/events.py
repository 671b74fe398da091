"""Helpers that build and register domain notifications."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from app.domain.entities import (
    NotificationCategory,
    NotificationRecord,
    NotificationRequest,
    NotificationType,
    WeatherHistoryEntry,
    WeatherSnapshot,
)

from .registry import NotificationRegistry

WEATHER_TITLE = "Weather Update"
WEATHER_ICON = "🌤️"


def notify_plant_saved(
    registry: NotificationRegistry, plant_name: str
) -> NotificationRecord | None:
    """Announce that ``plant_name`` was added to the favorites."""

    return registry.add_notification(
        NotificationRequest(
            type=NotificationType.IN_APP,
            category=NotificationCategory.PLANT,
            title="Plant Saved",
            message=f"{plant_name} has been added to your favorites",
            icon="🌿",
        )
    )


def build_weather_message(
    condition: str,
    temperature: int,
    *,
    location: str | None,
    is_default_location: bool,
) -> str:
    if is_default_location:
        location_text = " (Default Location)"
    elif location:
        location_text = f" in {location}"
    else:
        location_text = ""
    return f"Current weather{location_text}: {condition}, {temperature}°C"


def notify_weather_update(
    registry: NotificationRegistry, snapshot: WeatherSnapshot
) -> NotificationRecord | None:
    """Register ``snapshot`` keyed by its hour-and-location dedupe key."""

    return registry.add_notification(
        NotificationRequest(
            type=NotificationType.IN_APP,
            category=NotificationCategory.WEATHER,
            title=WEATHER_TITLE,
            message=build_weather_message(
                snapshot.condition,
                snapshot.temperature,
                location=snapshot.location,
                is_default_location=snapshot.is_default_location,
            ),
            icon=WEATHER_ICON,
            key=snapshot.dedupe_key,
            data=asdict(snapshot),
        )
    )


def replay_weather_entry(
    registry: NotificationRegistry, entry: WeatherHistoryEntry
) -> NotificationRecord | None:
    """Feed a remote history entry back into ``registry`` through the same de-dup path."""

    data: dict[str, Any] = {
        "condition": entry.condition,
        "temperature": entry.temperature,
        "humidity": entry.humidity,
        "wind_speed": entry.wind_speed,
        "location": entry.location,
        "is_default_location": entry.is_default_location,
        "dedupe_key": entry.dedupe_key,
    }
    return registry.add_notification(
        NotificationRequest(
            type=NotificationType.IN_APP,
            category=NotificationCategory.WEATHER,
            title=WEATHER_TITLE,
            message=build_weather_message(
                entry.condition,
                entry.temperature,
                location=entry.location,
                is_default_location=entry.is_default_location,
            ),
            icon=WEATHER_ICON,
            key=entry.dedupe_key,
            data=data,
        )
    )


def notify_toast(
    registry: NotificationRegistry,
    message: str,
    *,
    title: str = "LeafLens",
    category: NotificationCategory | str = NotificationCategory.SYSTEM,
) -> None:
    """Show a transient toast; toasts are never stored."""

    registry.add_notification(
        NotificationRequest(
            type=NotificationType.TOAST,
            category=category,
            title=title,
            message=message,
        )
    )


__all__ = [
    "WEATHER_ICON",
    "WEATHER_TITLE",
    "build_weather_message",
    "notify_plant_saved",
    "notify_toast",
    "notify_weather_update",
    "replay_weather_entry",
]

"""Weather notifications for the active user."""

from .poller import (
    DEFAULT_INTERVAL_SECONDS,
    WeatherPoller,
    WeatherPollerState,
    build_dedupe_key,
)

__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "WeatherPoller",
    "WeatherPollerState",
    "build_dedupe_key",
]

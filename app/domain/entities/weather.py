"""Domain entities for weather readings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class WeatherSnapshot:
    """Point-in-time weather reading mapped for notifications."""

    condition: str
    description: str
    temperature: int
    humidity: int | None
    wind_speed: float | None
    icon: str
    location: str
    country: str | None
    is_default_location: bool
    dedupe_key: str


@dataclass
class WeatherHistoryEntry:
    """Compact weather record mirrored to the per-user remote history."""

    id: int | None
    user_id: int
    dedupe_key: str
    condition: str
    temperature: int
    humidity: int | None
    wind_speed: float | None
    location: str | None = None
    is_default_location: bool = False
    created_at: datetime | None = None


__all__ = ["Coordinates", "WeatherHistoryEntry", "WeatherSnapshot"]

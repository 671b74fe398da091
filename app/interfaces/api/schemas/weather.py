"""Schemas for weather state and device location."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WeatherRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    condition: str
    description: str
    temperature: int
    humidity: int | None = None
    wind_speed: float | None = None
    icon: str
    location: str
    country: str | None = None
    is_default_location: bool
    dedupe_key: str


class WeatherStatus(BaseModel):
    state: str
    running: bool
    latitude: float | None = None
    longitude: float | None = None
    weather: WeatherRead | None = None


class LocationUpdate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationReport(BaseModel):
    """Position reported by the device, or a denial."""

    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    denied: bool = False

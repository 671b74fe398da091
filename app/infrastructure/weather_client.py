"""Client for the OpenWeatherMap current conditions endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.domain.entities import Coordinates

logger = logging.getLogger(__name__)

WEATHER_ICONS: dict[str, str] = {
    "01d": "☀️",
    "01n": "🌙",
    "02d": "⛅",
    "02n": "☁️",
    "03d": "☁️",
    "03n": "☁️",
    "04d": "☁️",
    "04n": "☁️",
    "09d": "🌧️",
    "09n": "🌧️",
    "10d": "🌦️",
    "10n": "🌧️",
    "11d": "⛈️",
    "11n": "⛈️",
    "13d": "🌨️",
    "13n": "🌨️",
    "50d": "🌫️",
    "50n": "🌫️",
}
UNKNOWN_WEATHER_ICON = "🌡️"


def weather_icon_for(icon_code: str | None) -> str:
    return WEATHER_ICONS.get(icon_code or "", UNKNOWN_WEATHER_ICON)


class WeatherServiceError(RuntimeError):
    """Error raised when the weather provider cannot be queried."""


class WeatherConfigurationError(WeatherServiceError):
    """Error raised when no API key is configured."""


@dataclass(frozen=True)
class CurrentConditions:
    """Fields consumed from a current conditions response."""

    condition: str
    description: str
    temperature: float
    humidity: int | None
    wind_speed: float | None
    icon_code: str | None
    location: str
    country: str | None


class OpenWeatherClient:
    """Query current conditions by coordinate using metric units."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def fetch_current(self, coordinates: Coordinates) -> CurrentConditions:
        if not self._api_key:
            raise WeatherConfigurationError("WEATHER_API_KEY is not configured")

        params = {
            "lat": coordinates.lat,
            "lon": coordinates.lon,
            "units": "metric",
            "appid": self._api_key,
        }
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(f"{self._base_url}/weather", params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise WeatherServiceError(
                f"Weather API request failed with status {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise WeatherServiceError("Weather API request failed") from exc

        return _parse_current_conditions(payload)


def _parse_current_conditions(payload: Any) -> CurrentConditions:
    try:
        weather = payload["weather"][0]
        main = payload["main"]
        wind = payload.get("wind") or {}
        return CurrentConditions(
            condition=str(weather["main"]),
            description=str(weather.get("description", "")),
            temperature=float(main["temp"]),
            humidity=main.get("humidity"),
            wind_speed=wind.get("speed"),
            icon_code=weather.get("icon"),
            location=str(payload.get("name") or ""),
            country=(payload.get("sys") or {}).get("country"),
        )
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.error("Unexpected weather payload: %s", payload)
        raise WeatherServiceError("Weather API returned an unexpected payload") from exc


__all__ = [
    "CurrentConditions",
    "OpenWeatherClient",
    "UNKNOWN_WEATHER_ICON",
    "WEATHER_ICONS",
    "WeatherConfigurationError",
    "WeatherServiceError",
    "weather_icon_for",
]

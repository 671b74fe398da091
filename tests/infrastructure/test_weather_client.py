"""Tests for the OpenWeatherMap client."""

from __future__ import annotations

import httpx
import pytest

from app.domain.entities import Coordinates
from app.infrastructure.weather_client import (
    OpenWeatherClient,
    WeatherConfigurationError,
    WeatherServiceError,
    weather_icon_for,
)

pytestmark = pytest.mark.anyio

PAYLOAD = {
    "name": "Paris",
    "sys": {"country": "FR"},
    "weather": [{"main": "Clouds", "description": "broken clouds", "icon": "04d"}],
    "main": {"temp": 17.6, "humidity": 72},
    "wind": {"speed": 4.1},
}


async def test_fetch_current_sends_metric_query_and_parses_payload():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=PAYLOAD)

    client = OpenWeatherClient(
        "secret", "https://weather.test/data/2.5/", transport=httpx.MockTransport(handler)
    )

    conditions = await client.fetch_current(Coordinates(lat=48.8566, lon=2.3522))

    assert requests[0].url.path == "/data/2.5/weather"
    params = requests[0].url.params
    assert params["units"] == "metric"
    assert params["appid"] == "secret"
    assert params["lat"] == "48.8566"
    assert conditions.condition == "Clouds"
    assert conditions.temperature == 17.6
    assert conditions.humidity == 72
    assert conditions.wind_speed == 4.1
    assert conditions.location == "Paris"
    assert conditions.country == "FR"
    assert weather_icon_for(conditions.icon_code) == "☁️"


async def test_error_status_raises_weather_service_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"cod": 401}))
    client = OpenWeatherClient("bad", "https://weather.test", transport=transport)

    with pytest.raises(WeatherServiceError, match="401"):
        await client.fetch_current(Coordinates(lat=0, lon=0))


async def test_unexpected_payload_raises_weather_service_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"main": {}}))
    client = OpenWeatherClient("key", "https://weather.test", transport=transport)

    with pytest.raises(WeatherServiceError):
        await client.fetch_current(Coordinates(lat=0, lon=0))


async def test_missing_key_is_reported_before_any_request():
    client = OpenWeatherClient(None, "https://weather.test")

    assert client.is_configured() is False
    with pytest.raises(WeatherConfigurationError):
        await client.fetch_current(Coordinates(lat=0, lon=0))


def test_unknown_icon_code_uses_thermometer():
    assert weather_icon_for("99x") == "🌡️"
    assert weather_icon_for(None) == "🌡️"

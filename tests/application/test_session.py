"""Tests for the session wiring between auth, notifications, weather and push."""

from __future__ import annotations

import anyio
import pytest

from app.application.use_cases.session import build_services
from app.application.use_cases.weather import WeatherPollerState
from app.config import get_settings
from app.domain.entities import ChatTurn
from app.infrastructure.capture import BrowserMediaCapture
from app.infrastructure.weather_client import CurrentConditions


class StaticWeatherClient:
    def is_configured(self) -> bool:
        return True

    async def fetch_current(self, coordinates):
        return CurrentConditions(
            condition="Rain",
            description="light rain",
            temperature=12.2,
            humidity=88,
            wind_speed=4.1,
            icon_code="10d",
            location="Seattle",
            country="US",
        )


def _build_services(geolocation_timeout: float = 0.01):
    settings = get_settings().model_copy(
        update={"firebase_vapid_key": "B" * 87, "geolocation_timeout_seconds": geolocation_timeout}
    )
    return build_services(
        settings,
        weather_client=StaticWeatherClient(),
        capture_device=BrowserMediaCapture(),
        reset_mailer=lambda email, password: True,
    )


@pytest.fixture
def services():
    services = _build_services()
    services.start()
    yield services
    services.shutdown()


def test_auth_changes_switch_the_notification_scope(services):
    assert services.registry.scope == "guest"

    result = services.auth.sign_up("rose@example.com", "secret1")
    assert services.registry.scope == result.user.uid

    services.auth.sign_out()
    assert services.registry.scope == "guest"


def test_chat_history_is_cleared_when_the_user_changes(services):
    services.auth.sign_up("rose@example.com", "secret1")
    services.chat_history.append(ChatTurn(role="user", content="Why are my leaves yellow?"))

    services.auth.sign_out()

    assert services.chat_history == []


@pytest.mark.anyio
async def test_sign_in_starts_weather_and_push(services):
    services.auth.sign_up("rose@example.com", "secret1")
    with anyio.fail_after(2):
        while not (services.push_bridge.initialized and services.poller.last_snapshot):
            await anyio.sleep(0.01)

    assert services.poller.is_running
    [weather] = services.registry.get_notifications_by_category("weather")
    assert weather.message == "Current weather (Default Location): Rain, 12°C"

    services.auth.sign_out()

    assert services.poller.is_running is False
    assert services.push_bridge.initialized is False


@pytest.mark.anyio
async def test_sign_out_while_locating_leaves_the_poller_idle():
    services = _build_services(geolocation_timeout=0.3)
    services.start()
    try:
        services.auth.sign_up("rose@example.com", "secret1")
        await anyio.sleep(0.05)
        assert services.poller.state is WeatherPollerState.LOCATING

        services.auth.sign_out()
        await anyio.sleep(0.4)

        assert services.poller.is_running is False
        assert services.poller.state is WeatherPollerState.IDLE
        assert services.poller.last_snapshot is None
        assert services.registry.get_notifications_by_category("weather") == []
    finally:
        services.shutdown()


class RecordingSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.closed_with: int | None = None

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message) -> None:
        pass

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed_with = code


@pytest.mark.anyio
async def test_sign_out_closes_the_sockets_of_the_previous_user(services):
    result = services.auth.sign_up("rose@example.com", "secret1")
    socket = RecordingSocket()
    await services.connection_manager.connect(result.user.uid, socket)

    services.auth.sign_out()
    with anyio.fail_after(1):
        while socket.closed_with is None:
            await anyio.sleep(0.01)

    assert socket.closed_with == 1008
    assert services.connection_manager.connection_count(result.user.uid) == 0

"""Application fixtures for the route tests."""

from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.application.use_cases.session import build_services
from app.domain.entities import Coordinates
from app.infrastructure.capture import BrowserMediaCapture
from app.infrastructure.weather_client import CurrentConditions
from main import create_app

VAPID_KEY = "B" * 87


class StaticWeatherClient:
    def __init__(self) -> None:
        self.requests: list[Coordinates] = []

    def is_configured(self) -> bool:
        return True

    async def fetch_current(self, coordinates: Coordinates) -> CurrentConditions:
        self.requests.append(coordinates)
        return CurrentConditions(
            condition="Clear",
            description="clear sky",
            temperature=21.6,
            humidity=40,
            wind_speed=2.0,
            icon_code="01d",
            location="Paris",
            country="FR",
        )


class RecordingMailer:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def __call__(self, email: str, password: str) -> bool:
        self.sent.append((email, password))
        return True


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def client(mailer):
    def services_builder(settings):
        settings = settings.model_copy(
            update={"firebase_vapid_key": VAPID_KEY, "geolocation_timeout_seconds": 0.01}
        )
        return build_services(
            settings,
            weather_client=StaticWeatherClient(),
            capture_device=BrowserMediaCapture(),
            reset_mailer=mailer,
        )

    with TestClient(create_app(services_builder=services_builder)) as test_client:
        yield test_client


@pytest.fixture
def services(client):
    return client.app.state.services


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    response = client.post(
        "/auth/sign-up",
        json={"email": "rose@example.com", "password": "secret1", "display_name": "Rose"},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), (20, 160, 40)).save(buffer, format="PNG")
    return buffer.getvalue()

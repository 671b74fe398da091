"""Shared fixtures; the environment is configured before ``app`` is imported."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "leaflens_api_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["PLANT_IDENTIFICATION_DELAY_SECONDS"] = "0"
os.environ["CAPTURE_BACKEND"] = "browser"
for name in (
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "WEATHER_API_KEY",
    "OPENROUTER_API_KEY",
    "FIREBASE_VAPID_KEY",
    "GOOGLE_CLIENT_ID",
):
    os.environ.pop(name, None)

from app.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from app.infrastructure.database import Base, engine, initialize_database  # noqa: E402


class MemoryStorage:
    """Dictionary backed stand-in for :class:`LocalStorage`."""

    def __init__(self) -> None:
        self.items: dict[str, str] = {}
        self.fail_writes = False

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("quota exceeded")
        self.items[key] = value


@pytest.fixture(autouse=True)
def reset_database():
    """Start every test from empty tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()

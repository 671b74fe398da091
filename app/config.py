"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./leaflens.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key for signing JWT tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone name or UTC offset used for display timestamps",
    )
    app_origin: str = Field(
        default="http://localhost:5173",
        description="Public origin of the client, sent as the chat HTTP-Referer",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending password reset emails",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    weather_api_key: str | None = Field(
        default=None, description="OpenWeatherMap API key"
    )
    weather_api_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Base URL of the current conditions endpoint",
    )
    weather_poll_interval_minutes: float = Field(
        default=30, description="Minutes between two weather notifications", gt=0
    )
    default_latitude: float = Field(default=40.7128, ge=-90, le=90)
    default_longitude: float = Field(default=-74.0060, ge=-180, le=180)
    geolocation_timeout_seconds: float = Field(default=10, gt=0)
    geolocation_max_age_seconds: float = Field(
        default=300,
        description="Maximum age of a reported device position before it is ignored",
        gt=0,
    )
    openrouter_api_key: str | None = Field(
        default=None, description="Credential for the hosted chat completion API"
    )
    openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1")
    openrouter_model: str = Field(default="meta-llama/llama-3.1-8b-instruct:free")
    firebase_vapid_key: str | None = Field(
        default=None, description="Web Push certificate public key"
    )
    google_client_id: str | None = Field(
        default=None, description="OAuth client id accepted as Google ID token audience"
    )
    capture_backend: str = Field(
        default="auto", pattern="^(auto|browser|native)$"
    )
    camera_device_index: int = Field(default=0, ge=0)
    plant_identification_delay_seconds: float = Field(default=1.5, ge=0)
    toast_duration_ms: int = Field(default=5000, gt=0)

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

"""Composition root wiring the session services together."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import Any, Callable

from anyio import from_thread
from sqlalchemy.orm import Session

from app.application.use_cases.auth import AuthService
from app.application.use_cases.notifications import NotificationRegistry
from app.application.use_cases.push import PushBridge
from app.application.use_cases.weather import WeatherPoller
from app.config import Settings
from app.domain.entities import ChatTurn, Coordinates, User
from app.infrastructure.capture import CaptureDevice, select_capture_device
from app.infrastructure.database import SessionLocal
from app.infrastructure.email import send_password_reset_email
from app.infrastructure.geolocation import DeviceLocationProvider
from app.infrastructure.google_auth import GoogleTokenVerifier
from app.infrastructure.local_storage import LocalStorage
from app.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)
from app.infrastructure.openai_client import ChatGateway
from app.infrastructure.push import WebPushChannel
from app.infrastructure.weather_client import OpenWeatherClient
from app.infrastructure.weather_history import WeatherHistoryStore

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Services shared by every request of the running session.

    The registry, poller and push bridge follow the signed-in user: on every
    auth change the registry switches scope, and the weather and push
    services are started for a user or stopped for a guest.
    """

    settings: Settings
    registry: NotificationRegistry
    auth: AuthService
    location_provider: DeviceLocationProvider
    history_store: WeatherHistoryStore
    weather_client: OpenWeatherClient
    poller: WeatherPoller
    push_channel: WebPushChannel
    push_bridge: PushBridge
    chat_gateway: ChatGateway
    capture_device: CaptureDevice
    connection_manager: NotificationConnectionManager
    publisher: NotificationPublisher
    chat_history: list[ChatTurn] = field(default_factory=list)
    _unsubscribers: list[Callable[[], None]] = field(default_factory=list, repr=False)
    _background_tasks: set[asyncio.Task] = field(default_factory=set, repr=False)

    @property
    def current_user(self) -> User | None:
        return self.auth.current_user

    def start(self) -> None:
        """Connect the registry to the websocket publisher and follow auth changes."""

        self._log_missing_configuration()
        self._unsubscribers.append(
            self.registry.subscribe(
                lambda records: self.publisher.publish_notifications(self.registry.scope, records)
            )
        )
        self._unsubscribers.append(
            self.registry.subscribe_toasts(
                lambda event: self.publisher.publish_toast(self.registry.scope, event)
            )
        )
        self._unsubscribers.append(self.auth.on_auth_state_changed(self._on_auth_state_changed))
        logger.info("Session services started")

    def shutdown(self) -> None:
        for unsubscribe in reversed(self._unsubscribers):
            unsubscribe()
        self._unsubscribers.clear()
        self.poller.stop_weather_updates()
        self.push_bridge.shutdown()
        self.capture_device.stop()
        for task in list(self._background_tasks):
            task.cancel()
        logger.info("Session services stopped")

    def _on_auth_state_changed(self, user: User | None) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run_sync(self._apply_auth_state, user)
                return
            except RuntimeError:
                logger.debug("No event loop available; applying auth change inline")
        self._apply_auth_state(user)

    def _apply_auth_state(self, user: User | None) -> None:
        logger.info("Auth state changed: %s", "user signed in" if user else "no user")
        previous_scope = self.registry.scope
        self.registry.set_user(user.uid if user else None)
        self.chat_history.clear()

        if user is None:
            for task in list(self._background_tasks):
                task.cancel()
            self.poller.stop_weather_updates()
            self.push_bridge.shutdown()

        if self.registry.scope != previous_scope:
            self._spawn(
                self.connection_manager.close_scope(previous_scope),
                "notification socket cleanup",
            )
        if user is None:
            return

        self.poller.subscribe_to_remote_weather(user.id)
        self._spawn(self.poller.init(), "weather service")
        self._spawn(self.push_bridge.init(), "push notifications")

    def _spawn(self, coroutine: Coroutine[Any, Any, Any], name: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coroutine.close()
            logger.debug("No event loop available; %s not started", name)
            return

        task = loop.create_task(coroutine)
        self._background_tasks.add(task)

        def _done(finished: asyncio.Task) -> None:
            self._background_tasks.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                logger.error("Failed to initialize %s: %s", name, exc)

        task.add_done_callback(_done)

    def _log_missing_configuration(self) -> None:
        if not self.weather_client.is_configured():
            logger.warning("Weather API key not configured; weather updates will fail")
        if not self.chat_gateway.is_configured():
            logger.warning("Chat API key not configured; chat will use canned answers")
        if not self.push_channel.is_configured():
            logger.warning("VAPID key missing or invalid; push notifications disabled")


def build_services(
    settings: Settings,
    *,
    session_factory: Callable[[], Session] = SessionLocal,
    weather_client: OpenWeatherClient | None = None,
    chat_gateway: ChatGateway | None = None,
    capture_device: CaptureDevice | None = None,
    google_verifier: GoogleTokenVerifier | None = None,
    reset_mailer: Callable[[str, str], bool] = send_password_reset_email,
) -> AppServices:
    """Create every session service from ``settings``."""

    push_channel = WebPushChannel(settings.firebase_vapid_key)
    registry = NotificationRegistry(
        LocalStorage(session_factory),
        toast_duration_ms=settings.toast_duration_ms,
        permission_requester=push_channel.request_permission,
    )
    auth = AuthService(
        session_factory,
        google_verifier=google_verifier or GoogleTokenVerifier(settings.google_client_id),
        reset_mailer=reset_mailer,
    )
    location_provider = DeviceLocationProvider(
        max_age_seconds=settings.geolocation_max_age_seconds
    )
    history_store = WeatherHistoryStore(session_factory)
    weather_client = weather_client or OpenWeatherClient(
        settings.weather_api_key, settings.weather_api_base_url
    )
    poller = WeatherPoller(
        registry,
        weather_client,
        location_provider,
        history_store,
        current_user=lambda: auth.current_user,
        default_location=Coordinates(
            lat=settings.default_latitude, lon=settings.default_longitude
        ),
        interval_seconds=settings.weather_poll_interval_minutes * 60,
        geolocation_timeout_seconds=settings.geolocation_timeout_seconds,
    )
    connection_manager = NotificationConnectionManager()

    return AppServices(
        settings=settings,
        registry=registry,
        auth=auth,
        location_provider=location_provider,
        history_store=history_store,
        weather_client=weather_client,
        poller=poller,
        push_channel=push_channel,
        push_bridge=PushBridge(registry, push_channel),
        chat_gateway=chat_gateway or ChatGateway.from_settings(settings),
        capture_device=capture_device or select_capture_device(settings),
        connection_manager=connection_manager,
        publisher=NotificationPublisher(connection_manager),
    )


__all__ = ["AppServices", "build_services"]

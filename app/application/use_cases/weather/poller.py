"""Periodic weather notifications with a per-user remote history."""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Callable, Protocol

import anyio

from app.application.use_cases.notifications import (
    NotificationRegistry,
    notify_weather_update,
    replay_weather_entry,
)
from app.domain.entities import (
    Coordinates,
    User,
    WeatherHistoryEntry,
    WeatherSnapshot,
)
from app.infrastructure.weather_client import CurrentConditions, weather_icon_for
from app.infrastructure.weather_history import HISTORY_QUERY_LIMIT
from app.utils import utc_now

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30 * 60

_HUNDREDTHS = Decimal("0.01")


class WeatherPollerState(str, Enum):
    IDLE = "idle"
    LOCATING = "locating"
    FETCHING = "fetching"
    NOTIFIED = "notified"


class WeatherProvider(Protocol):
    async def fetch_current(self, coordinates: Coordinates) -> CurrentConditions: ...


class LocationProvider(Protocol):
    async def get_current_position(self) -> Coordinates: ...


class HistoryStore(Protocol):
    def add(self, entry: WeatherHistoryEntry) -> WeatherHistoryEntry: ...

    def watch(
        self,
        user_id: int,
        on_added: Callable[[WeatherHistoryEntry], None],
        *,
        limit: int = ...,
    ) -> Callable[[], None]: ...


def _two_decimals(value: float) -> str:
    """Round the exact binary value to 2 decimals, ties away from zero."""

    rounded = Decimal(abs(value)).quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP)
    return f"-{rounded}" if value < 0 else str(rounded)


def build_dedupe_key(moment: datetime, coordinates: Coordinates) -> str:
    """Return ``weather-<UTC hour>-<lat>-<lon>`` with coordinates to 2 decimals."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    hour_key = moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H")
    lat, lon = _two_decimals(coordinates.lat), _two_decimals(coordinates.lon)
    return f"weather-{hour_key}-{lat}-{lon}"


class WeatherPoller:
    """Surface a weather notification every ``interval_seconds``.

    ``init`` resolves the location, starts the timer and emits once right
    away. ``stop_weather_updates`` clears the timer and the remote history
    subscription; cycles already in flight finish their request but no
    longer emit.
    """

    def __init__(
        self,
        registry: NotificationRegistry,
        weather_provider: WeatherProvider,
        location_provider: LocationProvider,
        history_store: HistoryStore,
        *,
        current_user: Callable[[], User | None],
        default_location: Coordinates,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        geolocation_timeout_seconds: float = 10,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._registry = registry
        self._weather_provider = weather_provider
        self._location_provider = location_provider
        self._history_store = history_store
        self._current_user = current_user
        self._default_location = default_location
        self._interval_seconds = interval_seconds
        self._geolocation_timeout_seconds = geolocation_timeout_seconds
        self._clock = clock

        self.current_location: Coordinates | None = None
        self.last_snapshot: WeatherSnapshot | None = None
        self._state = WeatherPollerState.IDLE
        self._generation = 0
        self._timer_task: asyncio.Task | None = None
        self._cycle_tasks: set[asyncio.Task] = set()
        self._remote_unsubscribe: Callable[[], None] | None = None

    @property
    def state(self) -> WeatherPollerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    async def init(self) -> None:
        generation = self._generation
        self._state = WeatherPollerState.LOCATING
        await self.update_location()
        if generation != self._generation:
            logger.debug("Weather updates stopped while locating; init abandoned")
            return
        self.start_weather_updates()
        await self._run_cycle(generation)
        logger.info("Weather service initialized")

    async def update_location(self) -> Coordinates | None:
        """Ask the device for its position, waiting at most the geolocation timeout."""

        try:
            with anyio.fail_after(self._geolocation_timeout_seconds):
                position = await self._location_provider.get_current_position()
        except TimeoutError:
            logger.warning("Geolocation timed out after %ss", self._geolocation_timeout_seconds)
            self.current_location = None
            return None
        except Exception as exc:
            logger.warning("Geolocation access denied or failed: %s", exc)
            self.current_location = None
            return None

        self.current_location = position
        logger.info("Location updated: %s, %s", position.lat, position.lon)
        return position

    async def get_weather(self) -> WeatherSnapshot:
        """Fetch current conditions for the resolved location.

        Errors from the weather provider propagate to the caller.
        """

        if self.current_location is None:
            await self.update_location()
        if self.current_location is None:
            logger.warning("Location not available, using default location")
            self.current_location = self._default_location

        coordinates = self.current_location
        conditions = await self._weather_provider.fetch_current(coordinates)
        return WeatherSnapshot(
            condition=conditions.condition,
            description=conditions.description,
            temperature=math.floor(conditions.temperature + 0.5),
            humidity=conditions.humidity,
            wind_speed=conditions.wind_speed,
            icon=weather_icon_for(conditions.icon_code),
            location=conditions.location,
            country=conditions.country,
            is_default_location=coordinates == self._default_location,
            dedupe_key=build_dedupe_key(self._clock(), coordinates),
        )

    def start_weather_updates(self) -> None:
        """(Re)start the periodic timer on the running event loop."""

        if self._timer_task is not None:
            self._timer_task.cancel()
        loop = asyncio.get_running_loop()
        self._timer_task = loop.create_task(self._run_timer(self._generation))

    def stop_weather_updates(self) -> None:
        self._generation += 1
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None
        if self._remote_unsubscribe is not None:
            self._remote_unsubscribe()
            self._remote_unsubscribe = None
        self._state = WeatherPollerState.IDLE

    async def refresh(self) -> WeatherSnapshot | None:
        """Fetch and emit once, outside the periodic cadence."""

        return await self._run_cycle(self._generation)

    async def set_location(self, lat: float, lon: float) -> WeatherSnapshot | None:
        self.current_location = Coordinates(lat=lat, lon=lon)
        logger.info("Location manually set to %s, %s", lat, lon)
        return await self.refresh()

    async def notify_weather_update(self, snapshot: WeatherSnapshot) -> None:
        """Register ``snapshot`` and append it to the remote history of the signed-in user.

        The history write runs in a worker thread; the store hands its listener
        fan-out back to the event loop.
        """

        notify_weather_update(self._registry, snapshot)

        user = self._current_user()
        if user is None or user.id is None:
            return
        try:
            await anyio.to_thread.run_sync(
                self._history_store.add,
                WeatherHistoryEntry(
                    id=None,
                    user_id=user.id,
                    dedupe_key=snapshot.dedupe_key,
                    condition=snapshot.condition,
                    temperature=snapshot.temperature,
                    humidity=snapshot.humidity,
                    wind_speed=snapshot.wind_speed,
                    location=snapshot.location,
                    is_default_location=snapshot.is_default_location,
                    created_at=self._clock(),
                ),
            )
        except Exception as exc:
            logger.warning("Failed to persist weather notification: %s", exc)

    def subscribe_to_remote_weather(self, user_id: int | str | None) -> None:
        """Replay the recent remote history of ``user_id`` into the registry."""

        if self._remote_unsubscribe is not None:
            self._remote_unsubscribe()
            self._remote_unsubscribe = None
        if not user_id:
            return
        self._remote_unsubscribe = self._history_store.watch(
            int(user_id),
            lambda entry: replay_weather_entry(self._registry, entry),
            limit=HISTORY_QUERY_LIMIT,
        )

    async def _run_timer(self, generation: int) -> None:
        while True:
            await anyio.sleep(self._interval_seconds)
            task = asyncio.get_running_loop().create_task(self._run_cycle(generation))
            self._cycle_tasks.add(task)
            task.add_done_callback(self._cycle_tasks.discard)

    async def _run_cycle(self, generation: int) -> WeatherSnapshot | None:
        previous_state = self._state
        self._state = WeatherPollerState.FETCHING
        try:
            snapshot = await self.get_weather()
        except Exception as exc:
            logger.error("Failed to update weather: %s", exc)
            if generation == self._generation:
                self._state = (
                    previous_state
                    if previous_state is WeatherPollerState.NOTIFIED
                    else WeatherPollerState.IDLE
                )
            return None

        if generation != self._generation:
            logger.debug("Discarding weather result fetched before stop")
            return None

        self.last_snapshot = snapshot
        await self.notify_weather_update(snapshot)
        self._state = WeatherPollerState.NOTIFIED
        return snapshot


__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "WeatherPoller",
    "WeatherPollerState",
    "build_dedupe_key",
]

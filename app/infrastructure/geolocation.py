"""Device geolocation as reported by the connected client."""

from __future__ import annotations

import logging
import time
from typing import Callable

import anyio

from app.domain.entities import Coordinates

logger = logging.getLogger(__name__)


class GeolocationUnavailableError(RuntimeError):
    """Raised when the device position is denied or unknown."""


class DeviceLocationProvider:
    """Hold the last position reported by the device.

    ``get_current_position`` returns a fresh report immediately, otherwise it
    waits for the next one; callers bound the wait with their own timeout.
    """

    def __init__(
        self,
        *,
        max_age_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_age_seconds = max_age_seconds
        self._clock = clock
        self._position: Coordinates | None = None
        self._reported_at: float | None = None
        self._denied = False
        self._waiters: list[anyio.Event] = []

    def report_position(self, lat: float, lon: float) -> Coordinates:
        self._position = Coordinates(lat=lat, lon=lon)
        self._reported_at = self._clock()
        self._denied = False
        self._wake_waiters()
        return self._position

    def report_denied(self) -> None:
        logger.warning("Device reported geolocation access denied")
        self._denied = True
        self._wake_waiters()

    async def get_current_position(self) -> Coordinates:
        position = self._fresh_position()
        if position is not None:
            return position
        if self._denied:
            raise GeolocationUnavailableError("Geolocation access denied")

        event = anyio.Event()
        self._waiters.append(event)
        try:
            await event.wait()
        finally:
            if event in self._waiters:
                self._waiters.remove(event)

        position = self._fresh_position()
        if position is None:
            raise GeolocationUnavailableError("Geolocation access denied")
        return position

    def _fresh_position(self) -> Coordinates | None:
        if self._position is None or self._reported_at is None:
            return None
        if self._clock() - self._reported_at > self._max_age_seconds:
            return None
        return self._position

    def _wake_waiters(self) -> None:
        waiters, self._waiters = self._waiters, []
        for event in waiters:
            event.set()


__all__ = ["DeviceLocationProvider", "GeolocationUnavailableError"]

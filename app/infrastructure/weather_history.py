"""Per-user weather history store with live query subscriptions."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Callable, DefaultDict

from anyio import from_thread
from sqlalchemy.orm import Session

from app.domain.entities import WeatherHistoryEntry
from app.infrastructure.database import SessionLocal
from app.infrastructure.repositories import WeatherHistoryRepository

logger = logging.getLogger(__name__)

HISTORY_QUERY_LIMIT = 20

EntryListener = Callable[[WeatherHistoryEntry], None]


class WeatherHistoryStore:
    """Append-only history documents grouped by user.

    ``watch`` behaves like a live query ordered newest-first and capped to
    ``limit`` entries: the current window is reported as added entries right
    away, then every entry written afterwards is reported as it arrives.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory
        self._listeners: DefaultDict[int, list[EntryListener]] = defaultdict(list)

    def add(self, entry: WeatherHistoryEntry) -> WeatherHistoryEntry:
        """Write ``entry`` and report it to the watchers of its user.

        Called from a worker thread, the watchers run on the event loop.
        """

        with self._session_factory() as session:
            saved = WeatherHistoryRepository(session).add(entry)
        self._dispatch(saved)
        return saved

    def list_recent(
        self, user_id: int, *, limit: int = HISTORY_QUERY_LIMIT
    ) -> Sequence[WeatherHistoryEntry]:
        with self._session_factory() as session:
            return WeatherHistoryRepository(session).list_recent(user_id, limit=limit)

    def watch(
        self,
        user_id: int,
        on_added: EntryListener,
        *,
        limit: int = HISTORY_QUERY_LIMIT,
    ) -> Callable[[], None]:
        """Subscribe ``on_added`` to entries of ``user_id``; return the unsubscribe handle."""

        for entry in self.list_recent(user_id, limit=limit):
            self._notify(on_added, entry)
        self._listeners[user_id].append(on_added)

        def unsubscribe() -> None:
            listeners = self._listeners.get(user_id)
            if listeners is None:
                return
            if on_added in listeners:
                listeners.remove(on_added)
            if not listeners:
                self._listeners.pop(user_id, None)

        return unsubscribe

    def _dispatch(self, entry: WeatherHistoryEntry) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run_sync(self._notify_watchers, entry)
                return
            except RuntimeError:
                logger.debug("No event loop available; notifying watchers inline")
        self._notify_watchers(entry)

    def _notify_watchers(self, entry: WeatherHistoryEntry) -> None:
        for listener in list(self._listeners.get(entry.user_id, ())):
            self._notify(listener, entry)

    @staticmethod
    def _notify(listener: EntryListener, entry: WeatherHistoryEntry) -> None:
        try:
            listener(entry)
        except Exception:  # pragma: no cover
            logger.exception("Weather history listener failed for entry %s", entry.id)


__all__ = ["HISTORY_QUERY_LIMIT", "WeatherHistoryStore"]

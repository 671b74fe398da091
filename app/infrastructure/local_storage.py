"""Durable key/value cache used for client-side state such as notifications."""

from __future__ import annotations

from typing import Callable

from sqlalchemy.orm import Session

from app.infrastructure.database import SessionLocal
from app.infrastructure.repositories import LocalStorageRepository


class LocalStorage:
    """Per-process text blob store keyed by string, one session per call."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def get_item(self, key: str) -> str | None:
        with self._session_factory() as session:
            return LocalStorageRepository(session).get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            LocalStorageRepository(session).set(key, value)

    def remove_item(self, key: str) -> None:
        with self._session_factory() as session:
            LocalStorageRepository(session).delete(key)


__all__ = ["LocalStorage"]

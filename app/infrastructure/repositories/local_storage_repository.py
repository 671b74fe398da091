"""Persistence helpers for the key/value cache."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.infrastructure.models import LocalStorageModel


class LocalStorageRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> str | None:
        model = self.session.get(LocalStorageModel, key)
        return model.value if model else None

    def set(self, key: str, value: str) -> None:
        model = self.session.get(LocalStorageModel, key)
        if model is None:
            model = LocalStorageModel(key=key, value=value)
        else:
            model.value = value
        self.session.add(model)
        self.session.commit()

    def delete(self, key: str) -> None:
        model = self.session.get(LocalStorageModel, key)
        if model is None:
            return
        self.session.delete(model)
        self.session.commit()


__all__ = ["LocalStorageRepository"]

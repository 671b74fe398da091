"""Persistence helpers for the per-user weather history."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import WeatherHistoryEntry
from app.infrastructure.models import WeatherHistoryModel
from app.utils import ensure_utc_naive_datetime, utc_now


class WeatherHistoryRepository:
    """Append and query :class:`WeatherHistoryEntry` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entry: WeatherHistoryEntry) -> WeatherHistoryEntry:
        model = WeatherHistoryModel(
            user_id=entry.user_id,
            dedupe_key=entry.dedupe_key,
            condition=entry.condition,
            temperature=entry.temperature,
            humidity=entry.humidity,
            wind_speed=entry.wind_speed,
            location=entry.location,
            is_default_location=entry.is_default_location,
            created_at=ensure_utc_naive_datetime(entry.created_at or utc_now()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_recent(self, user_id: int, *, limit: int = 20) -> Sequence[WeatherHistoryEntry]:
        query = (
            self.session.query(WeatherHistoryModel)
            .filter(WeatherHistoryModel.user_id == user_id)
            .order_by(
                WeatherHistoryModel.created_at.desc(), WeatherHistoryModel.id.desc()
            )
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: WeatherHistoryModel) -> WeatherHistoryEntry:
        return WeatherHistoryEntry(
            id=model.id,
            user_id=model.user_id,
            dedupe_key=model.dedupe_key,
            condition=model.condition,
            temperature=model.temperature,
            humidity=model.humidity,
            wind_speed=model.wind_speed,
            location=model.location,
            is_default_location=bool(model.is_default_location),
            created_at=model.created_at,
        )


__all__ = ["WeatherHistoryRepository"]

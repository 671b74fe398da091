"""Persistence helpers for favorite plants."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict

from sqlalchemy.orm import Session

from app.domain.entities import CareGuide, Favorite
from app.infrastructure.models import FavoriteModel
from app.utils import ensure_app_timezone, ensure_utc_naive_datetime, utc_now


class FavoriteRepository:
    """Provide create, delete and query operations for :class:`Favorite`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: int) -> Sequence[Favorite]:
        query = (
            self.session.query(FavoriteModel)
            .filter(FavoriteModel.user_id == user_id)
            .order_by(FavoriteModel.saved_at.desc(), FavoriteModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def get(self, favorite_id: int) -> Favorite | None:
        model = self.session.get(FavoriteModel, favorite_id)
        return self._to_entity(model) if model else None

    def create(self, favorite: Favorite) -> Favorite:
        model = FavoriteModel(
            user_id=favorite.user_id,
            name=favorite.name,
            scientific_name=favorite.scientific_name,
            description=favorite.description,
            care_guide=asdict(favorite.care_guide),
            fun_facts=list(favorite.fun_facts),
            image=favorite.image,
            saved_at=ensure_utc_naive_datetime(favorite.saved_at or utc_now()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, favorite_id: int) -> bool:
        model = self.session.get(FavoriteModel, favorite_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    @staticmethod
    def _to_entity(model: FavoriteModel) -> Favorite:
        care_guide = model.care_guide or {}
        return Favorite(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            scientific_name=model.scientific_name or "",
            description=model.description or "",
            care_guide=CareGuide(
                water=care_guide.get("water", ""),
                sunlight=care_guide.get("sunlight", ""),
                soil=care_guide.get("soil", ""),
                temperature=care_guide.get("temperature", ""),
            ),
            fun_facts=list(model.fun_facts or []),
            image=model.image,
            saved_at=ensure_app_timezone(model.saved_at),
        )


__all__ = ["FavoriteRepository"]

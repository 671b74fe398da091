"""Use cases for the favorite plants of the signed-in user."""

from __future__ import annotations

from collections.abc import Sequence

import anyio
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    NotificationRegistry,
    notify_plant_saved,
    notify_toast,
)
from app.domain.entities import CapturedImage, Favorite, NotificationCategory, PlantInfo, User
from app.infrastructure.repositories import FavoriteRepository


class FavoriteNotFoundError(LookupError):
    """Raised when a favorite does not exist for the requesting user."""


def _require_user(user: User | None) -> User:
    if user is None or user.id is None:
        raise PermissionError("User must be logged in to manage favorites")
    return user


async def save_favorite(
    session: Session,
    registry: NotificationRegistry,
    *,
    user: User | None,
    plant: PlantInfo,
    image: CapturedImage,
) -> Favorite:
    """Store ``plant`` with its image and announce it as saved.

    The insert runs in a worker thread; the announcements stay on the event loop.
    """

    owner = _require_user(user)
    favorite = await anyio.to_thread.run_sync(
        FavoriteRepository(session).create,
        Favorite(
            id=None,
            user_id=owner.id,
            name=plant.name,
            scientific_name=plant.scientific_name,
            description=plant.description,
            care_guide=plant.care_guide,
            fun_facts=list(plant.fun_facts),
            image=image.as_data_url(),
        ),
    )
    notify_toast(registry, "Plant added to favorites!", category=NotificationCategory.PLANT)
    notify_plant_saved(registry, plant.name)
    return favorite


def remove_favorite(session: Session, *, user: User | None, favorite_id: int) -> None:
    owner = _require_user(user)
    repository = FavoriteRepository(session)
    favorite = repository.get(favorite_id)
    if favorite is None or favorite.user_id != owner.id:
        raise FavoriteNotFoundError("Favorite not found")
    repository.delete(favorite_id)


def list_favorites(session: Session, *, user: User | None) -> Sequence[Favorite]:
    owner = _require_user(user)
    return FavoriteRepository(session).list_for_user(owner.id)


__all__ = ["FavoriteNotFoundError", "list_favorites", "remove_favorite", "save_favorite"]

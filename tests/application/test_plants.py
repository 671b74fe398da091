"""Tests for plant identification and the favorites use cases."""

from __future__ import annotations

import threading

import pytest

from app.application.use_cases.notifications import NotificationRegistry
from app.application.use_cases.plants import (
    SAMPLE_PLANT,
    FavoriteNotFoundError,
    identify_plant,
    list_favorites,
    remove_favorite,
    save_favorite,
)
from app.domain.entities import CapturedImage, User
from app.infrastructure.database import SessionLocal
from app.infrastructure.repositories import FavoriteRepository, UserRepository


@pytest.fixture
def registry(memory_storage) -> NotificationRegistry:
    registry = NotificationRegistry(memory_storage)
    registry.set_user("1")
    return registry


@pytest.fixture
def toasts(registry) -> list:
    events: list = []
    registry.subscribe_toasts(events.append)
    return events


def _create_user(email: str) -> User:
    with SessionLocal() as session:
        return UserRepository(session).create(
            User(
                id=None,
                email=email,
                display_name=None,
                password=None,
                provider="password",
                created_at=None,
                last_login=None,
            )
        )


@pytest.mark.anyio
async def test_identify_plant_returns_the_sample_and_toasts(registry, toasts):
    plant = await identify_plant(registry, CapturedImage(data="/9j/abc"), delay_seconds=0)

    assert plant is SAMPLE_PLANT
    assert [event.record.message for event in toasts] == ["Plant identified successfully!"]
    assert registry.get_notifications() == []


@pytest.mark.anyio
async def test_identify_plant_rejects_empty_images(registry, toasts):
    with pytest.raises(ValueError):
        await identify_plant(registry, CapturedImage(data=""), delay_seconds=0)

    assert toasts[0].record.message == "Failed to analyze plant. Please try again."


@pytest.mark.anyio
async def test_saved_favorite_is_listed_and_announced(registry, toasts):
    owner = _create_user("rose@example.com")
    other = _create_user("fern@example.com")

    with SessionLocal() as session:
        favorite = await save_favorite(
            session, registry, user=owner, plant=SAMPLE_PLANT, image=CapturedImage(data="/9j/abc")
        )
        assert favorite.image == "data:image/jpeg;base64,/9j/abc"
        assert [item.id for item in list_favorites(session, user=owner)] == [favorite.id]
        assert list_favorites(session, user=other) == []

    [record] = registry.get_notifications()
    assert record.title == "Plant Saved"
    assert record.message == "Sample Plant has been added to your favorites"
    assert toasts[0].record.message == "Plant added to favorites!"


@pytest.mark.anyio
async def test_favorites_belong_to_their_owner(registry):
    owner = _create_user("rose@example.com")
    other = _create_user("fern@example.com")

    with SessionLocal() as session:
        favorite = await save_favorite(
            session, registry, user=owner, plant=SAMPLE_PLANT, image=CapturedImage(data="eA==")
        )
        with pytest.raises(FavoriteNotFoundError):
            remove_favorite(session, user=other, favorite_id=favorite.id)

        remove_favorite(session, user=owner, favorite_id=favorite.id)
        assert list_favorites(session, user=owner) == []


def test_favorites_require_a_signed_in_user(registry):
    with SessionLocal() as session, pytest.raises(PermissionError):
        list_favorites(session, user=None)


@pytest.mark.anyio
async def test_favorite_insert_runs_in_a_worker_thread(registry, monkeypatch):
    owner = _create_user("rose@example.com")
    insert_threads: list[int] = []
    create = FavoriteRepository.create

    def recording_create(self, favorite):
        insert_threads.append(threading.get_ident())
        return create(self, favorite)

    monkeypatch.setattr(FavoriteRepository, "create", recording_create)

    with SessionLocal() as session:
        await save_favorite(
            session, registry, user=owner, plant=SAMPLE_PLANT, image=CapturedImage(data="eA==")
        )

    assert len(insert_threads) == 1
    assert insert_threads[0] != threading.get_ident()
    assert registry.get_notifications()[0].title == "Plant Saved"

"""Endpoints for the favorite plants collection."""

from __future__ import annotations

import base64
import binascii

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.application.use_cases.plants import (
    FavoriteNotFoundError,
    list_favorites,
    remove_favorite,
    save_favorite,
)
from app.application.use_cases.session import AppServices
from app.domain.entities import CapturedImage, CareGuide, Favorite, PlantInfo, User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user, get_services
from app.interfaces.api.schemas import FavoriteCreate, FavoriteRead

router = APIRouter(prefix="/favorites", tags=["favorites"])

_DATA_URL_PREFIX = "data:image/jpeg;base64,"


def _favorite_to_schema(favorite: Favorite) -> FavoriteRead:
    return FavoriteRead.model_validate(favorite)


def _decode_image(value: str) -> CapturedImage:
    data = value[len(_DATA_URL_PREFIX):] if value.startswith(_DATA_URL_PREFIX) else value
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Image must be base64 encoded",
        ) from exc
    return CapturedImage(data=data)


@router.get("/", response_model=list[FavoriteRead])
def read_favorites(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[FavoriteRead]:
    return [_favorite_to_schema(favorite) for favorite in list_favorites(db, user=current_user)]


@router.post("/", response_model=FavoriteRead, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    payload: FavoriteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> FavoriteRead:
    """Save an identified plant and announce it in the notification list."""

    plant = PlantInfo(
        name=payload.plant.name,
        scientific_name=payload.plant.scientific_name,
        description=payload.plant.description,
        care_guide=CareGuide(**payload.plant.care_guide.model_dump()),
        fun_facts=list(payload.plant.fun_facts),
    )
    favorite = await save_favorite(
        db,
        services.registry,
        user=current_user,
        plant=plant,
        image=_decode_image(payload.image),
    )
    return _favorite_to_schema(favorite)


@router.delete("/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_favorite(
    favorite_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    try:
        remove_favorite(db, user=current_user, favorite_id=favorite_id)
    except FavoriteNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)

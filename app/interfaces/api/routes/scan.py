"""Endpoints for capturing a plant photo and identifying it."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.application.use_cases.notifications import notify_toast
from app.application.use_cases.plants import identify_plant
from app.application.use_cases.session import AppServices
from app.domain.entities import CapturedImage, NotificationCategory, User
from app.infrastructure.capture import BrowserMediaCapture, CaptureError
from app.interfaces.api.dependencies import get_current_user, get_services
from app.interfaces.api.schemas import (
    CaptureStatus,
    CapturedImageRead,
    IdentificationRead,
    PlantInfoSchema,
)

router = APIRouter(prefix="/scan", tags=["scan"])
logger = logging.getLogger(__name__)


def _capture_status(services: AppServices) -> CaptureStatus:
    device = services.capture_device
    return CaptureStatus(backend=device.kind, streaming=device.is_streaming)


async def _identify(services: AppServices, image: CapturedImage) -> IdentificationRead:
    try:
        plant = await identify_plant(
            services.registry,
            image,
            delay_seconds=services.settings.plant_identification_delay_seconds,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return IdentificationRead(
        plant=PlantInfoSchema.model_validate(plant),
        image=CapturedImageRead.model_validate(image),
    )


def _capture_failed(services: AppServices, exc: CaptureError) -> HTTPException:
    logger.warning("Capture failed: %s", exc)
    notify_toast(services.registry, str(exc), category=NotificationCategory.PLANT)
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.post("/identify", response_model=IdentificationRead)
async def identify_uploaded_image(
    file: UploadFile = File(...),
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> IdentificationRead:
    """Identify the plant in a user-selected image file."""

    raw = await file.read()
    try:
        image = services.capture_device.accept_file(raw)
    except CaptureError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return await _identify(services, image)


@router.post("/capture/start", response_model=CaptureStatus)
async def start_capture(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> CaptureStatus:
    try:
        services.capture_device.start()
    except CaptureError as exc:
        raise _capture_failed(services, exc) from exc
    return _capture_status(services)


@router.post("/capture/stop", response_model=CaptureStatus)
async def stop_capture(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> CaptureStatus:
    services.capture_device.stop()
    return _capture_status(services)


@router.post("/capture/frame", response_model=CaptureStatus)
async def push_capture_frame(
    file: UploadFile = File(...),
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> CaptureStatus:
    """Receive the latest frame of the browser media stream."""

    device = services.capture_device
    if not isinstance(device, BrowserMediaCapture):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="The active capture device does not accept streamed frames",
        )
    try:
        device.push_frame(await file.read())
    except CaptureError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _capture_status(services)


@router.post("/capture/photo", response_model=IdentificationRead)
async def capture_photo(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> IdentificationRead:
    """Take a still from the running stream and identify it."""

    try:
        image = services.capture_device.capture()
    except CaptureError as exc:
        raise _capture_failed(services, exc) from exc
    return await _identify(services, image)

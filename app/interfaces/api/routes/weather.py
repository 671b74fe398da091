"""Endpoints for the weather notifications and the device location."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.application.use_cases.session import AppServices
from app.domain.entities import User
from app.interfaces.api.dependencies import get_current_user, get_services
from app.interfaces.api.schemas import (
    LocationReport,
    LocationUpdate,
    WeatherRead,
    WeatherStatus,
)

router = APIRouter(prefix="/weather", tags=["weather"])


def _weather_status(services: AppServices) -> WeatherStatus:
    poller = services.poller
    location = poller.current_location
    snapshot = poller.last_snapshot
    return WeatherStatus(
        state=poller.state.value,
        running=poller.is_running,
        latitude=location.lat if location else None,
        longitude=location.lon if location else None,
        weather=WeatherRead.model_validate(snapshot) if snapshot else None,
    )


@router.get("/", response_model=WeatherStatus)
async def read_weather(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> WeatherStatus:
    return _weather_status(services)


@router.put("/location", response_model=WeatherStatus)
async def set_location(
    payload: LocationUpdate,
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> WeatherStatus:
    """Override the location and emit a weather update for it right away."""

    await services.poller.set_location(payload.latitude, payload.longitude)
    return _weather_status(services)


@router.post("/device-location", status_code=status.HTTP_202_ACCEPTED)
async def report_device_location(
    payload: LocationReport,
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> Response:
    """Record the position reported by the device, or its refusal to share it."""

    if payload.denied or payload.latitude is None or payload.longitude is None:
        services.location_provider.report_denied()
    else:
        services.location_provider.report_position(payload.latitude, payload.longitude)
    return Response(status_code=status.HTTP_202_ACCEPTED)


@router.post("/refresh", response_model=WeatherStatus)
async def refresh_weather(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> WeatherStatus:
    await services.poller.refresh()
    return _weather_status(services)

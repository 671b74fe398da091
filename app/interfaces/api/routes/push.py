"""Endpoints used by the device to register for and relay push messages."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.application.use_cases.session import AppServices
from app.domain.entities import PushMessage, User
from app.interfaces.api.dependencies import get_current_user, get_services
from app.interfaces.api.schemas import (
    PushDeliveryResponse,
    PushMessageCreate,
    PushStatus,
    PushTokenRegistration,
)

router = APIRouter(prefix="/push", tags=["push"])


def _push_status(services: AppServices) -> PushStatus:
    bridge = services.push_bridge
    return PushStatus(
        configured=services.push_channel.is_configured(),
        initialized=bridge.initialized,
        has_token=bridge.token is not None,
    )


@router.get("/status", response_model=PushStatus)
async def read_push_status(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> PushStatus:
    return _push_status(services)


@router.post("/token", response_model=PushStatus)
async def register_token(
    payload: PushTokenRegistration,
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> PushStatus:
    """Store the device token, or the permission refusal, and (re)initialise push."""

    channel = services.push_channel
    if not payload.permission_granted:
        channel.report_permission(False)
        services.push_bridge.shutdown()
        return _push_status(services)

    channel.report_permission(True)
    if payload.token:
        channel.register_device_token(payload.token)

    if services.push_bridge.initialized:
        await services.push_bridge.update_token()
    else:
        await services.push_bridge.init()
    return _push_status(services)


@router.post("/messages", response_model=PushDeliveryResponse)
async def deliver_message(
    payload: PushMessageCreate,
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> PushDeliveryResponse:
    """Relay a message received by the device while the app is in the foreground."""

    delivered = services.push_channel.deliver(
        PushMessage(
            title=payload.title,
            body=payload.body,
            icon=payload.icon,
            category=payload.category,
            data=dict(payload.data),
        )
    )
    return PushDeliveryResponse(delivered=delivered)

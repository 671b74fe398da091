"""Endpoints and websocket handler for the notification list."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from app.application.use_cases.notifications import InvalidNotificationError
from app.application.use_cases.session import AppServices
from app.domain.entities import NotificationRequest, User
from app.infrastructure.notifications import serialize_notification
from app.interfaces.api.dependencies import (
    get_current_user,
    get_services,
    resolve_current_user,
)
from app.interfaces.api.schemas import (
    NotificationCreate,
    NotificationList,
    NotificationRead,
    PushPermissionResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_list(services: AppServices, category: str | None = None) -> NotificationList:
    registry = services.registry
    records = (
        registry.get_notifications_by_category(category)
        if category
        else registry.get_notifications()
    )
    return NotificationList(
        notifications=[NotificationRead.model_validate(record) for record in records],
        unread_count=registry.unread_count(),
    )


@router.get("/", response_model=NotificationList)
async def list_notifications(
    category: str | None = Query(default=None, description="plant, weather or system"),
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> NotificationList:
    """Return the notifications of the signed-in user, newest first."""

    return _notification_list(services, category)


@router.post("/", response_model=NotificationRead | None)
async def create_notification(
    payload: NotificationCreate,
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> NotificationRead | None:
    """Add a notification; toasts and duplicates are not stored and return null."""

    try:
        record = services.registry.add_notification(
            NotificationRequest(**payload.model_dump())
        )
    except InvalidNotificationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return NotificationRead.model_validate(record) if record else None


@router.post("/read-all", response_model=NotificationList)
async def mark_all_notifications_read(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> NotificationList:
    services.registry.mark_all_as_read()
    return _notification_list(services)


@router.post("/{notification_id}/read", response_model=NotificationList)
async def mark_notification_read(
    notification_id: int,
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> NotificationList:
    """Mark one notification as read; unknown ids leave the list unchanged."""

    services.registry.mark_as_read(notification_id)
    return _notification_list(services)


@router.post("/push-permission", response_model=PushPermissionResponse)
async def request_push_permission(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> PushPermissionResponse:
    granted = await services.registry.request_push_permission()
    return PushPermissionResponse(granted=granted)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream the notification list and toasts of the signed-in user."""

    services: AppServices = websocket.app.state.services
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        resolve_current_user(token, services)
    except HTTPException:
        await websocket.close(code=1008)
        return

    scope = services.registry.scope
    manager = services.connection_manager
    await manager.connect(scope, websocket)
    try:
        await websocket.send_json(
            {
                "type": "notifications",
                "data": [
                    serialize_notification(record)
                    for record in services.registry.get_notifications()
                ],
            }
        )
        while True:
            message = await websocket.receive_json()
            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "read" and isinstance(message.get("id"), int):
                services.registry.mark_as_read(message["id"])
            elif message_type == "read_all":
                services.registry.mark_all_as_read()
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for %s", scope)
    finally:
        manager.disconnect(scope, websocket)

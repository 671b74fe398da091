"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationType


class NotificationCreate(BaseModel):
    """Notification request submitted by the client."""

    type: NotificationType
    category: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    icon: str | None = None
    key: str | None = Field(default=None, description="De-duplication key")
    data: Any = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: NotificationType
    category: str
    title: str
    message: str
    icon: str
    timestamp: datetime
    read: bool
    key: str | None = None
    data: Any = None


class NotificationList(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int


class PushPermissionResponse(BaseModel):
    granted: bool


__all__ = [
    "NotificationCreate",
    "NotificationList",
    "NotificationRead",
    "PushPermissionResponse",
]

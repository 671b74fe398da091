"""Schemas for push registration and delivered messages."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class PushTokenRegistration(BaseModel):
    token: str | None = Field(default=None, description="Registration token issued to the device")
    permission_granted: bool = True


class PushStatus(BaseModel):
    configured: bool
    initialized: bool
    has_token: bool


class PushMessageCreate(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    icon: str | None = None
    category: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class PushDeliveryResponse(BaseModel):
    delivered: int

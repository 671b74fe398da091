"""Schemas for the plant expert chat."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, description="Question for the plant expert")


class ChatTurnRead(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatMessageResponse(BaseModel):
    reply: str
    from_fallback: bool
    history: list[ChatTurnRead]


class ChatStatus(BaseModel):
    configured: bool
    model: str


class ChatModelRead(BaseModel):
    id: str
    owned_by: str | None = None


class ChatModelUpdate(BaseModel):
    model: str = Field(..., min_length=1)

"""Endpoints for the plant expert chat."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.use_cases.chat import answer_message
from app.application.use_cases.session import AppServices
from app.domain.entities import ChatTurn, User
from app.infrastructure.openai_client import (
    ChatConfigurationError,
    ChatGateway,
    ChatGatewayError,
)
from app.interfaces.api.dependencies import get_chat_gateway, get_current_user, get_services
from app.interfaces.api.schemas import (
    ChatMessageRequest,
    ChatMessageResponse,
    ChatModelRead,
    ChatModelUpdate,
    ChatStatus,
    ChatTurnRead,
)

router = APIRouter(prefix="/chat", tags=["chat"])
logger = logging.getLogger(__name__)


def _history_schema(history: list[ChatTurn]) -> list[ChatTurnRead]:
    return [ChatTurnRead(role=turn.role, content=turn.content) for turn in history]


@router.post("/message", response_model=ChatMessageResponse)
def send_message(
    payload: ChatMessageRequest,
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
    gateway: ChatGateway = Depends(get_chat_gateway),
) -> ChatMessageResponse:
    """Answer a plant care question using the conversation so far as context."""

    question = payload.message.strip()
    reply = answer_message(gateway, question, services.chat_history)
    services.chat_history.append(ChatTurn(role="user", content=question))
    services.chat_history.append(ChatTurn(role="assistant", content=reply.text))
    return ChatMessageResponse(
        reply=reply.text,
        from_fallback=reply.from_fallback,
        history=_history_schema(services.chat_history),
    )


@router.get("/status", response_model=ChatStatus)
def read_status(
    _: User = Depends(get_current_user),
    gateway: ChatGateway = Depends(get_chat_gateway),
) -> ChatStatus:
    return ChatStatus(configured=gateway.is_configured(), model=gateway.model)


@router.get("/models", response_model=list[ChatModelRead])
def read_models(
    _: User = Depends(get_current_user),
    gateway: ChatGateway = Depends(get_chat_gateway),
) -> list[ChatModelRead]:
    try:
        models = gateway.get_models()
    except ChatConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except ChatGatewayError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return [ChatModelRead(**model) for model in models]


@router.put("/model", response_model=ChatStatus)
def update_model(
    payload: ChatModelUpdate,
    _: User = Depends(get_current_user),
    gateway: ChatGateway = Depends(get_chat_gateway),
) -> ChatStatus:
    gateway.set_model(payload.model)
    logger.info("Chat model set to %s", payload.model)
    return ChatStatus(configured=gateway.is_configured(), model=gateway.model)

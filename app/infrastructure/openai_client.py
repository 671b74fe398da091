"""Client for the hosted, OpenAI-compatible chat completion gateway."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from openai import APIStatusError, OpenAI, OpenAIError

from app.config import Settings
from app.domain.entities import ChatTurn

logger = logging.getLogger(__name__)

APP_TITLE = "LeafLens AI"

SYSTEM_PROMPT = """You are a helpful plant care expert and botanist. You have extensive knowledge about:
- Plant identification and care
- Common plant diseases and treatments
- Soil types and fertilization
- Watering schedules and techniques
- Light requirements for different plants
- Indoor and outdoor gardening tips
- Plant propagation methods
- Seasonal plant care
- Fun facts about the plant or any historical background

Always provide helpful, accurate, and practical advice. If you're unsure about something, say so and suggest consulting a local plant expert or nursery. Keep responses conversational but informative."""

_SAMPLING_PARAMETERS: dict[str, Any] = {
    "max_tokens": 500,
    "temperature": 0.7,
    "top_p": 1,
    "frequency_penalty": 0,
    "presence_penalty": 0,
}


class ChatConfigurationError(RuntimeError):
    """Error raised when the gateway credential is missing."""


class ChatGatewayError(RuntimeError):
    """Error raised when the gateway does not answer as expected."""


def _to_message(turn: ChatTurn | Mapping[str, str]) -> dict[str, str]:
    if isinstance(turn, ChatTurn):
        return turn.as_message()
    role = turn.get("role")
    if role not in ("user", "assistant"):
        raise ValueError(f"Unsupported chat role: {role!r}")
    return {"role": role, "content": str(turn.get("content", ""))}


class ChatGateway:
    """Format conversations for the chat completion API and return the reply text."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str,
        model: str,
        app_origin: str | None = None,
        client_factory: Callable[..., OpenAI] = OpenAI,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._base_url = base_url
        self._model = model
        self._app_origin = app_origin
        self._client_factory = client_factory
        self._client: OpenAI | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatGateway":
        return cls(
            settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            model=settings.openrouter_model,
            app_origin=settings.app_origin,
        )

    @property
    def model(self) -> str:
        return self._model

    def set_model(self, model_id: str) -> None:
        self._model = model_id

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def send_message(
        self,
        user_text: str,
        history: Sequence[ChatTurn | Mapping[str, str]] = (),
    ) -> str:
        """Send ``user_text`` after the system prompt and ``history``."""

        client = self._get_client()
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        messages.extend(_to_message(turn) for turn in history)
        messages.append({"role": "user", "content": user_text})

        try:
            completion = client.chat.completions.create(
                model=self._model,
                messages=messages,
                extra_headers=self._extra_headers(),
                **_SAMPLING_PARAMETERS,
            )
        except APIStatusError as exc:
            raise ChatGatewayError(
                f"Chat API error: {exc.status_code} - {exc.message}"
            ) from exc
        except OpenAIError as exc:
            raise ChatGatewayError("Chat API request failed") from exc

        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise ChatGatewayError("Invalid response format from chat API") from exc
        if not content or not content.strip():
            raise ChatGatewayError("Invalid response format from chat API")

        logger.debug("Chat reply received from model %s", self._model)
        return content.strip()

    def get_models(self) -> list[dict[str, Any]]:
        client = self._get_client()
        try:
            page = client.models.list()
        except OpenAIError as exc:
            raise ChatGatewayError("Failed to fetch models") from exc
        return [{"id": model.id, "owned_by": getattr(model, "owned_by", None)} for model in page]

    def _get_client(self) -> OpenAI:
        if not self._api_key:
            raise ChatConfigurationError(
                "OPENROUTER_API_KEY is not configured. Set it in the environment."
            )
        if self._client is None:
            self._client = self._client_factory(api_key=self._api_key, base_url=self._base_url)
        return self._client

    def _extra_headers(self) -> dict[str, str]:
        headers = {"X-Title": APP_TITLE}
        if self._app_origin:
            headers["HTTP-Referer"] = self._app_origin
        return headers


__all__ = [
    "APP_TITLE",
    "ChatConfigurationError",
    "ChatGateway",
    "ChatGatewayError",
    "SYSTEM_PROMPT",
]

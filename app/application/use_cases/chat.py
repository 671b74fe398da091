"""Plant expert chat with canned answers when the gateway is unavailable."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from app.domain.entities import ChatTurn
from app.infrastructure.openai_client import (
    ChatConfigurationError,
    ChatGateway,
    ChatGatewayError,
)

logger = logging.getLogger(__name__)

MAX_HISTORY_TURNS = 10

_FALLBACK_RESPONSES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("water", "watering", "overwater"),
        "Most houseplants like to dry out slightly between waterings. Check the top "
        "2-3 cm of soil with your finger and water thoroughly only when it feels dry, "
        "letting excess water drain from the pot.",
    ),
    (
        ("light", "sun", "shade"),
        "Bright, indirect light suits most indoor plants. Leggy growth or pale leaves "
        "usually mean too little light, while scorched brown patches point to harsh "
        "direct sun.",
    ),
    (
        ("disease", "pest", "spots", "yellow", "fungus"),
        "Isolate the plant, remove affected leaves and check the undersides for pests. "
        "Improve air circulation and avoid wetting the foliage; treat persistent "
        "problems with neem oil or an appropriate fungicide.",
    ),
    (
        ("fertilizer", "fertiliser", "fertilize", "nutrient", "feed"),
        "Feed actively growing plants every 4-6 weeks in spring and summer with a "
        "balanced liquid fertilizer at half strength, and pause feeding in winter.",
    ),
)

GENERIC_FALLBACK = (
    "I'm having trouble reaching the plant expert right now. Ask me about watering, "
    "light, diseases or fertilizer and I'll share some general care tips."
)


@dataclass(frozen=True)
class ChatReply:
    text: str
    from_fallback: bool


def fallback_response(user_text: str) -> str:
    """Return the canned answer whose keywords appear in ``user_text``."""

    normalized = user_text.lower()
    for keywords, answer in _FALLBACK_RESPONSES:
        if any(keyword in normalized for keyword in keywords):
            return answer
    return GENERIC_FALLBACK


def answer_message(
    gateway: ChatGateway,
    user_text: str,
    history: Sequence[ChatTurn] = (),
) -> ChatReply:
    """Ask the gateway using the last turns of ``history`` as context."""

    recent_history = list(history)[-MAX_HISTORY_TURNS:]
    if not gateway.is_configured():
        return ChatReply(text=fallback_response(user_text), from_fallback=True)

    try:
        text = gateway.send_message(user_text, recent_history)
    except (ChatConfigurationError, ChatGatewayError) as exc:
        logger.warning("Chat gateway unavailable, using fallback answer: %s", exc)
        return ChatReply(text=fallback_response(user_text), from_fallback=True)
    return ChatReply(text=text, from_fallback=False)


__all__ = [
    "ChatReply",
    "GENERIC_FALLBACK",
    "MAX_HISTORY_TURNS",
    "answer_message",
    "fallback_response",
]

"""Tests for the chat completion gateway and the chat use case."""

from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from app.application.use_cases.chat import GENERIC_FALLBACK, answer_message, fallback_response
from app.domain.entities import ChatTurn
from app.infrastructure.openai_client import (
    SYSTEM_PROMPT,
    ChatConfigurationError,
    ChatGateway,
    ChatGatewayError,
)


class FakeCompletions:
    def __init__(self, content="Water weekly.", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.content is None:
            return SimpleNamespace(choices=[])
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))]
        )


class FakeOpenAI:
    def __init__(self, completions: FakeCompletions) -> None:
        self.chat = SimpleNamespace(completions=completions)
        self.models = SimpleNamespace(
            list=lambda: [SimpleNamespace(id="meta-llama/llama-3.1-8b-instruct:free", owned_by="meta")]
        )


def _gateway(completions: FakeCompletions, api_key: str | None = "sk-test") -> ChatGateway:
    created: list[dict] = []

    def factory(**kwargs):
        created.append(kwargs)
        return FakeOpenAI(completions)

    gateway = ChatGateway(
        api_key,
        base_url="https://openrouter.test/api/v1",
        model="test/model",
        app_origin="http://localhost:5173",
        client_factory=factory,
    )
    gateway.created_clients = created
    return gateway


def test_send_message_formats_the_conversation():
    completions = FakeCompletions(content="  Water weekly.  ")
    gateway = _gateway(completions)
    history = [
        ChatTurn(role="user", content="Hi"),
        ChatTurn(role="assistant", content="Hello! How can I help?"),
    ]

    reply = gateway.send_message("How often should I water a fern?", history)

    assert reply == "Water weekly."
    call = completions.calls[0]
    assert call["model"] == "test/model"
    assert call["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert call["messages"][1:3] == [turn.as_message() for turn in history]
    assert call["messages"][-1] == {"role": "user", "content": "How often should I water a fern?"}
    assert call["max_tokens"] == 500
    assert call["temperature"] == 0.7
    assert call["top_p"] == 1
    assert call["frequency_penalty"] == 0
    assert call["presence_penalty"] == 0
    assert call["extra_headers"] == {
        "X-Title": "LeafLens AI",
        "HTTP-Referer": "http://localhost:5173",
    }
    assert gateway.created_clients == [
        {"api_key": "sk-test", "base_url": "https://openrouter.test/api/v1"}
    ]


def test_missing_key_raises_configuration_error():
    gateway = _gateway(FakeCompletions(), api_key="  ")

    assert gateway.is_configured() is False
    with pytest.raises(ChatConfigurationError):
        gateway.send_message("Hello")


def test_empty_choices_raise_gateway_error():
    gateway = _gateway(FakeCompletions(content=None))

    with pytest.raises(ChatGatewayError, match="Invalid response format"):
        gateway.send_message("Hello")


def test_transport_errors_raise_gateway_error():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://openrouter.test"))
    gateway = _gateway(FakeCompletions(error=error))

    with pytest.raises(ChatGatewayError):
        gateway.send_message("Hello")


def test_models_and_model_selection():
    gateway = _gateway(FakeCompletions())

    models = gateway.get_models()
    gateway.set_model(models[0]["id"])

    assert models == [{"id": "meta-llama/llama-3.1-8b-instruct:free", "owned_by": "meta"}]
    assert gateway.model == "meta-llama/llama-3.1-8b-instruct:free"


def test_answer_message_sends_only_the_last_ten_turns():
    completions = FakeCompletions()
    gateway = _gateway(completions)
    history = [ChatTurn(role="user", content=f"question {index}") for index in range(15)]

    reply = answer_message(gateway, "And now?", history)

    assert reply.from_fallback is False
    sent = completions.calls[0]["messages"]
    assert len(sent) == 1 + 10 + 1
    assert sent[1]["content"] == "question 5"


def test_answer_message_falls_back_when_unconfigured():
    completions = FakeCompletions()
    gateway = _gateway(completions, api_key=None)

    reply = answer_message(gateway, "How much WATER does a cactus need?")

    assert reply.from_fallback is True
    assert "water" in reply.text.lower()
    assert completions.calls == []


def test_answer_message_falls_back_on_gateway_errors():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://openrouter.test"))
    gateway = _gateway(FakeCompletions(error=error))

    reply = answer_message(gateway, "My leaves have spots")

    assert reply.from_fallback is True
    assert reply.text == fallback_response("disease")


def test_fallback_without_keyword_is_generic():
    assert fallback_response("Tell me a joke") == GENERIC_FALLBACK

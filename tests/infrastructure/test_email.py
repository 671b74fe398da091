"""Unit tests for the SendGrid email helpers."""

from __future__ import annotations

import json

import pytest

from app.config import reset_settings_cache
from app.infrastructure import email


@pytest.fixture
def sendgrid_settings(monkeypatch):
    monkeypatch.setenv("SENDGRID_API_KEY", "SG.test")
    monkeypatch.setenv("SENDGRID_SENDER", "noreply@leaflens.test")
    reset_settings_cache()
    yield
    reset_settings_cache()


class _Response:
    def __init__(self, status_code: int, body=b"") -> None:
        self.status_code = status_code
        self.body = body


def _install_client(monkeypatch, response):
    sent = []

    class FakeClient:
        def __init__(self, api_key: str) -> None:
            self.api_key = api_key

        def send(self, message):
            sent.append(message)
            return response

    monkeypatch.setattr(email, "SendGridAPIClient", FakeClient)
    return sent


def test_email_is_skipped_without_configuration(monkeypatch):
    sent = _install_client(monkeypatch, _Response(202))

    assert email.send_email("Subject", "<p>Body</p>", "user@example.com") is False
    assert sent == []


def test_password_reset_email_contains_the_temporary_password(monkeypatch, sendgrid_settings):
    sent = _install_client(monkeypatch, _Response(202))

    assert email.send_password_reset_email("user@example.com", "Tmp#Pass1") is True

    payload = sent[0].get()
    assert payload["subject"] == "Reset your LeafLens password"
    assert "Tmp#Pass1" in payload["content"][0]["value"]


def test_unsuccessful_status_is_logged(monkeypatch, sendgrid_settings, caplog):
    body = json.dumps({"errors": [{"message": "The from address does not match"}]})
    _install_client(monkeypatch, _Response(403, body.encode()))

    assert email.send_email("Subject", "<p>Body</p>", "user@example.com") is False
    assert "The from address does not match" in caplog.text

"""Transactional email delivery through SendGrid."""

from __future__ import annotations

import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import get_settings

logger = logging.getLogger(__name__)


def _describe_sendgrid_body(body: Any) -> str | None:
    """Return the error messages carried by a SendGrid response body."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        messages = [
            str(item["message"])
            for item in body["errors"]
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
    if body in (None, ""):
        return None
    return json.dumps(body, default=str)


def _log_delivery_failure(status_code: Any, body: Any) -> None:
    details = _describe_sendgrid_body(body)
    if details:
        logger.error("SendGrid delivery failed with status %s: %s", status_code, details)
    else:
        logger.error("SendGrid delivery failed with status %s", status_code)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        response = SendGridAPIClient(settings.sendgrid_api_key).send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_delivery_failure(getattr(exc, "status_code", None), getattr(exc, "body", None))
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_delivery_failure(status_code, getattr(response, "body", None))
        return False
    return True


def send_password_reset_email(email: str, password: str) -> bool:
    """Mail the temporary password generated for ``email``."""

    html_content = "".join(
        (
            "<p>Hello,</p>",
            "<p>A temporary password was generated for your LeafLens account.</p>",
            f"<p><strong>Password:</strong> {password}</p>",
            "<p>Sign in and change it as soon as possible.</p>",
        )
    )
    return send_email("Reset your LeafLens password", html_content, email)


__all__ = ["send_email", "send_password_reset_email"]

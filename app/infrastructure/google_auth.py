"""Verification of Google ID tokens against the published signing keys."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

GOOGLE_CERTS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class GoogleTokenError(ValueError):
    """Raised when a Google ID token cannot be trusted."""


class GoogleTokenVerifier:
    """Validate ID tokens issued to ``client_id``.

    The key set is fetched on first use and fetched again once when a token
    names a key id that is not in the cached set.
    """

    def __init__(
        self,
        client_id: str | None,
        *,
        certs_url: str = GOOGLE_CERTS_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._certs_url = certs_url
        self._transport = transport
        self._jwks: dict[str, Any] | None = None

    def is_configured(self) -> bool:
        return bool(self._client_id)

    def verify(self, id_token: str) -> dict[str, Any]:
        if not self._client_id:
            raise GoogleTokenError("Google sign-in is not configured")

        try:
            header = jwt.get_unverified_header(id_token)
        except JWTError as exc:
            raise GoogleTokenError("Malformed Google ID token") from exc

        jwks = self._get_jwks()
        if not self._has_key(jwks, header.get("kid")):
            jwks = self._get_jwks(refresh=True)

        try:
            claims = jwt.decode(
                id_token,
                jwks,
                algorithms=["RS256"],
                audience=self._client_id,
                issuer=GOOGLE_ISSUERS,
                options={"verify_at_hash": False},
            )
        except JWTError as exc:
            raise GoogleTokenError("Invalid Google ID token") from exc

        if not claims.get("email"):
            raise GoogleTokenError("Google account has no email address")
        if claims.get("email_verified") is False:
            raise GoogleTokenError("Google account email is not verified")
        return claims

    def _get_jwks(self, *, refresh: bool = False) -> dict[str, Any]:
        if self._jwks is not None and not refresh:
            return self._jwks
        try:
            with httpx.Client(transport=self._transport, timeout=10) as client:
                response = client.get(self._certs_url)
                response.raise_for_status()
                self._jwks = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Could not fetch Google signing keys: %s", exc)
            raise GoogleTokenError("Google signing keys are unavailable") from exc
        return self._jwks

    @staticmethod
    def _has_key(jwks: dict[str, Any], kid: str | None) -> bool:
        return any(key.get("kid") == kid for key in jwks.get("keys", []))


__all__ = ["GOOGLE_CERTS_URL", "GoogleTokenError", "GoogleTokenVerifier"]

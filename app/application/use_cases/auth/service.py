"""Identity service tracking the signed-in user of this session."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import AuthResult, User
from app.infrastructure.database import SessionLocal
from app.infrastructure.email import send_password_reset_email
from app.infrastructure.google_auth import GoogleTokenError, GoogleTokenVerifier
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import (
    create_access_token,
    decode_access_token,
    generate_secure_password,
    get_password_hash,
    verify_password,
)
from app.utils import utc_now

from .validators import ensure_valid_password, normalize_email

logger = logging.getLogger(__name__)

PASSWORD_PROVIDER = "password"
GOOGLE_PROVIDER = "google"
INVALID_CREDENTIALS = "Invalid email or password"

AuthListener = Callable[[User | None], None]


class AuthService:
    """Sign users in and out and tell listeners whenever the user changes.

    Every operation returns an :class:`AuthResult`; failures are reported in
    ``AuthResult.error`` instead of being raised.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        *,
        google_verifier: GoogleTokenVerifier | None = None,
        reset_mailer: Callable[[str, str], bool] = send_password_reset_email,
    ) -> None:
        self._session_factory = session_factory
        self._google_verifier = google_verifier
        self._reset_mailer = reset_mailer
        self._current_user: User | None = None
        self._listeners: dict[object, AuthListener] = {}

    @property
    def current_user(self) -> User | None:
        return self._current_user

    def on_auth_state_changed(self, listener: AuthListener) -> Callable[[], None]:
        """Call ``listener`` now with the current user and after every change."""

        token = object()
        self._listeners[token] = listener
        listener(self._current_user)

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            normalized_email = normalize_email(email)
        except ValueError:
            return AuthResult(error=INVALID_CREDENTIALS)

        try:
            with self._session_factory() as session:
                repository = UserRepository(session)
                user = repository.get_by_email(normalized_email)
                if user is None or not verify_password(password, user.password):
                    return AuthResult(error=INVALID_CREDENTIALS)
                if not user.is_active:
                    return AuthResult(error="This account has been disabled")
                user = repository.update(replace(user, last_login=utc_now()))
        except SQLAlchemyError as exc:
            logger.exception("Sign-in failed for %s", normalized_email)
            return AuthResult(error=str(exc))

        return self._signed_in(user)

    def sign_up(self, email: str, password: str, display_name: str | None = None) -> AuthResult:
        try:
            normalized_email = normalize_email(email)
            ensure_valid_password(password)
        except ValueError as exc:
            return AuthResult(error=str(exc))

        try:
            with self._session_factory() as session:
                repository = UserRepository(session)
                if repository.get_by_email(normalized_email):
                    return AuthResult(error="Email address is already in use")
                user = repository.create(
                    User(
                        id=None,
                        email=normalized_email,
                        display_name=(display_name or "").strip() or None,
                        password=get_password_hash(password),
                        provider=PASSWORD_PROVIDER,
                        created_at=None,
                        last_login=utc_now(),
                    )
                )
        except SQLAlchemyError as exc:
            logger.exception("Sign-up failed for %s", normalized_email)
            return AuthResult(error=str(exc))

        logger.info("User %s registered", user.id)
        return self._signed_in(user)

    def sign_in_with_google(self, id_token: str) -> AuthResult:
        """Sign in with a Google ID token, creating the account on first use."""

        if self._google_verifier is None or not self._google_verifier.is_configured():
            return AuthResult(error="Google sign-in is not configured")
        try:
            claims = self._google_verifier.verify(id_token)
        except GoogleTokenError as exc:
            logger.warning("Google sign-in rejected: %s", exc)
            return AuthResult(error=str(exc))

        email = str(claims["email"]).strip().lower()
        try:
            with self._session_factory() as session:
                repository = UserRepository(session)
                user = repository.get_by_email(email)
                if user is None:
                    user = repository.create(
                        User(
                            id=None,
                            email=email,
                            display_name=claims.get("name"),
                            password=None,
                            provider=GOOGLE_PROVIDER,
                            created_at=None,
                            last_login=utc_now(),
                        )
                    )
                elif not user.is_active:
                    return AuthResult(error="This account has been disabled")
                else:
                    user = repository.update(replace(user, last_login=utc_now()))
        except SQLAlchemyError as exc:
            logger.exception("Google sign-in failed for %s", email)
            return AuthResult(error=str(exc))

        return self._signed_in(user)

    def sign_out(self) -> AuthResult:
        if self._current_user is not None:
            logger.info("User %s signed out", self._current_user.id)
        self._set_current_user(None)
        return AuthResult()

    def reset_password(self, email: str) -> AuthResult:
        """Replace the password of ``email`` with a temporary one and mail it."""

        try:
            normalized_email = normalize_email(email)
        except ValueError as exc:
            return AuthResult(error=str(exc))

        temporary_password = generate_secure_password()
        try:
            with self._session_factory() as session:
                repository = UserRepository(session)
                user = repository.get_by_email(normalized_email)
                if user is None or not user.is_active:
                    return AuthResult(error="No account found for this email")
                repository.update(
                    replace(user, password=get_password_hash(temporary_password))
                )
        except SQLAlchemyError as exc:
            logger.exception("Password reset failed for %s", normalized_email)
            return AuthResult(error=str(exc))

        if not self._reset_mailer(normalized_email, temporary_password):
            return AuthResult(error="Password reset email could not be sent")
        return AuthResult()

    def restore_session(self, access_token: str) -> AuthResult:
        """Resume the session identified by a previously issued token."""

        try:
            payload = decode_access_token(access_token)
            user_id = int(payload["sub"])
        except (ValueError, KeyError, TypeError) as exc:
            return AuthResult(error=str(exc) or "Could not validate credentials")

        with self._session_factory() as session:
            user = UserRepository(session).get(user_id)
        if user is None or not user.is_active:
            return AuthResult(error="Could not validate credentials")

        self._set_current_user(user)
        return AuthResult(user=user, access_token=access_token)

    def _signed_in(self, user: User) -> AuthResult:
        self._set_current_user(user)
        return AuthResult(user=user, access_token=create_access_token(user.id))

    def _set_current_user(self, user: User | None) -> None:
        previous_id = self._current_user.id if self._current_user else None
        self._current_user = user
        if (user.id if user else None) == previous_id:
            return
        for listener in list(self._listeners.values()):
            try:
                listener(user)
            except Exception:
                logger.exception("Auth state listener failed")


__all__ = ["AuthListener", "AuthService", "GOOGLE_PROVIDER", "PASSWORD_PROVIDER"]

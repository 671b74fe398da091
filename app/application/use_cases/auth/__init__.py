"""Use cases for signing users in and out."""

from .service import AuthListener, AuthService, GOOGLE_PROVIDER, PASSWORD_PROVIDER
from .validators import MIN_PASSWORD_LENGTH, ensure_valid_password, normalize_email

__all__ = [
    "AuthListener",
    "AuthService",
    "GOOGLE_PROVIDER",
    "MIN_PASSWORD_LENGTH",
    "PASSWORD_PROVIDER",
    "ensure_valid_password",
    "normalize_email",
]

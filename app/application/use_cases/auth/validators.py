"""Validation helpers for credentials submitted to the identity service."""

from email_validator import EmailNotValidError, validate_email

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    """Return the normalized form of ``email`` or raise ``ValueError``."""

    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Invalid email address") from exc
    return result.normalized.lower()


def ensure_valid_password(password: str) -> str:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
        )
    return password

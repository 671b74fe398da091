"""Password hashing and access token helpers."""

from __future__ import annotations

import secrets
import string
from datetime import timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.utils import utc_now

TOKEN_ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=310_000,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str | int, expires_delta: timedelta | None = None) -> str:
    """Sign a token identifying ``subject`` for the configured lifetime."""

    settings = get_settings()
    expire = utc_now() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode(
        {"sub": str(subject), "exp": expire},
        settings.secret_key,
        algorithm=TOKEN_ALGORITHM,
    )


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[TOKEN_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def generate_secure_password() -> str:
    """Generate a random password between 8 and 12 characters."""

    alphabet = string.ascii_letters + string.digits + string.punctuation
    length = secrets.choice(range(8, 13))

    while True:
        password = "".join(secrets.choice(alphabet) for _ in range(length))
        if (
            any(char.islower() for char in password)
            and any(char.isupper() for char in password)
            and any(char.isdigit() for char in password)
            and any(char in string.punctuation for char in password)
        ):
            return password


__all__ = [
    "create_access_token",
    "decode_access_token",
    "generate_secure_password",
    "get_password_hash",
    "verify_password",
]

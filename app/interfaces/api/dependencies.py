"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from app.application.use_cases.session import AppServices
from app.domain.entities import User
from app.infrastructure.openai_client import ChatGateway
from app.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_services(request: Request) -> AppServices:
    """Return the session services built at application start-up."""

    return request.app.state.services


def resolve_current_user(token: str, services: AppServices) -> User:
    """Return the user of ``token``, making it the session user when needed."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    subject = payload.get("sub")
    if subject is None:
        raise _credentials_exception()

    current_user = services.auth.current_user
    if current_user is not None and current_user.uid == str(subject):
        return current_user

    result = services.auth.restore_session(token)
    if not result.ok or result.user is None:
        raise _credentials_exception(result.error or "Could not validate credentials")
    return result.user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    services: AppServices = Depends(get_services),
) -> User:
    """Return the authenticated user from the provided token."""

    user = resolve_current_user(token, services)
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return user


def get_chat_gateway(services: AppServices = Depends(get_services)) -> ChatGateway:
    return services.chat_gateway

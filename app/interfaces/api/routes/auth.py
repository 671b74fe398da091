"""Endpoints for signing in, signing up and password recovery."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from app.application.use_cases.session import AppServices
from app.domain.entities import AuthResult, User
from app.interfaces.api.dependencies import get_current_user, get_services
from app.interfaces.api.schemas import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    GoogleSignInRequest,
    SignUpRequest,
    Token,
    UserRead,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

_PASSWORD_RESET_MESSAGE = (
    "If the email is registered you will receive a message with a temporary password."
)


def _token_response(result: AuthResult, *, failure_status: int) -> Token:
    if not result.ok or result.user is None or result.access_token is None:
        raise HTTPException(
            status_code=failure_status,
            detail=result.error or "Authentication failed",
            headers={"WWW-Authenticate": "Bearer"}
            if failure_status == status.HTTP_401_UNAUTHORIZED
            else None,
        )
    return Token(
        access_token=result.access_token,
        user=UserRead.model_validate(result.user),
    )


@router.post("/sign-up", response_model=Token, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: SignUpRequest,
    services: AppServices = Depends(get_services),
) -> Token:
    """Create an email/password account and sign it in."""

    result = services.auth.sign_up(payload.email, payload.password, payload.display_name)
    return _token_response(result, failure_status=status.HTTP_400_BAD_REQUEST)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    services: AppServices = Depends(get_services),
) -> Token:
    """Authenticate by email and password and return a bearer token."""

    result = services.auth.sign_in(form_data.username, form_data.password)
    return _token_response(result, failure_status=status.HTTP_401_UNAUTHORIZED)


@router.post("/google", response_model=Token)
def sign_in_with_google(
    payload: GoogleSignInRequest,
    services: AppServices = Depends(get_services),
) -> Token:
    result = services.auth.sign_in_with_google(payload.id_token)
    return _token_response(result, failure_status=status.HTTP_401_UNAUTHORIZED)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(
    _: User = Depends(get_current_user),
    services: AppServices = Depends(get_services),
) -> Response:
    services.auth.sign_out()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def forgot_password(
    payload: ForgotPasswordRequest,
    services: AppServices = Depends(get_services),
) -> ForgotPasswordResponse:
    """Mail a temporary password without revealing whether the account exists."""

    result = services.auth.reset_password(payload.email)
    if not result.ok:
        logger.info("Password reset ignored for %s: %s", payload.email, result.error)
    return ForgotPasswordResponse(message=_PASSWORD_RESET_MESSAGE)


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)

"""Authentication related schemas."""

from pydantic import BaseModel, EmailStr, Field

from .user import UserRead


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: str | None = Field(default=None, max_length=100)


class GoogleSignInRequest(BaseModel):
    id_token: str = Field(..., min_length=1, description="ID token issued by Google Sign-In")


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address of the account")


class ForgotPasswordResponse(BaseModel):
    message: str

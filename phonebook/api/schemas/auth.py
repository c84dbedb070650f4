from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .common import MIN_PASSWORD_LENGTH


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=256)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=256)


class EmailRequest(BaseModel):
    email: EmailStr


class RefreshRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(..., min_length=1, alias="refreshToken")


class ForgotPasswordResetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=256, alias="newPassword")
    retype_new_password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=256,
        alias="retypeNewPassword",
    )


class AuthUserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    subscription: str
    avatar_url: str | None = Field(default=None, alias="avatarURL")
    verified: bool


class SignupResponse(BaseModel):
    user: AuthUserResponse


class AuthTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    token_type: str = Field(default="bearer", alias="tokenType")
    access_expires_at: datetime = Field(..., alias="accessExpiresAt")
    refresh_expires_at: datetime = Field(..., alias="refreshExpiresAt")
    user: AuthUserResponse

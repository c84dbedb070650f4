from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthUserOutput:
    id: str
    name: str
    email: str
    subscription: str
    avatar_url: str | None
    email_verified: bool


@dataclass(frozen=True)
class RegisterUserInput:
    name: str
    email: str
    password: str


@dataclass(frozen=True)
class RegisterUserOutput:
    user: AuthUserOutput


@dataclass(frozen=True)
class LoginLocalInput:
    email: str
    password: str


@dataclass(frozen=True)
class RefreshSessionInput:
    refresh_token: str


@dataclass(frozen=True)
class LogoutInput:
    access_token: str


@dataclass(frozen=True)
class AuthTokensOutput:
    user: AuthUserOutput
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass(frozen=True)
class VerifyEmailInput:
    verification_token: str


@dataclass(frozen=True)
class ResendVerificationInput:
    email: str


@dataclass(frozen=True)
class RequestPasswordResetInput:
    email: str


@dataclass(frozen=True)
class CompletePasswordResetInput:
    token: str
    new_password: str
    retype_new_password: str

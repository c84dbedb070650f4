from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MeOutput:
    user_id: str
    name: str
    email: str
    subscription: str
    avatar_url: str | None
    email_verified: bool


@dataclass(frozen=True)
class UpdateSubscriptionInput:
    user_id: str
    subscription: str


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: str
    current_password: str
    new_password: str
    retype_new_password: str


@dataclass(frozen=True)
class UpdateAvatarInput:
    user_id: str
    content: bytes
    filename: str


@dataclass(frozen=True)
class UpdateAvatarOutput:
    avatar_url: str

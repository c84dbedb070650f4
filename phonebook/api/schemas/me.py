from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from phonebook.domain.entities.user import Subscription

from .common import MIN_PASSWORD_LENGTH


class MeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    subscription: str
    avatar_url: str | None = Field(default=None, alias="avatarURL")
    verified: bool


class SubscriptionRequest(BaseModel):
    subscription: Subscription


class SubscriptionResponse(BaseModel):
    email: str
    subscription: str


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=256, alias="currentPassword")
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=256, alias="newPassword")
    retype_new_password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=256,
        alias="retypeNewPassword",
    )


class AvatarResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    avatar_url: str = Field(..., alias="avatarURL")

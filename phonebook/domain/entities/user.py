from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, get_args


Subscription = Literal["starter", "pro", "business"]

SUBSCRIPTIONS: tuple[str, ...] = get_args(Subscription)
DEFAULT_SUBSCRIPTION: Subscription = "starter"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    password_hash: str
    subscription: Subscription
    avatar_url: str | None
    email_verified: bool
    verification_token_hash: str | None
    verification_token_expires_at: datetime | None
    password_reset_token_hash: str | None
    password_reset_expires_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class AuthSession:
    id: str
    user_id: str
    access_token_hash: str
    refresh_token_hash: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

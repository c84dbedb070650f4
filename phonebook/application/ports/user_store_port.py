from __future__ import annotations

from datetime import datetime
from typing import Protocol

from phonebook.domain.entities.user import Subscription, User


class UserStorePort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_email(self, *, email: str) -> User | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        avatar_url: str | None,
        verification_token_hash: str,
        verification_token_expires_at: datetime,
        now: datetime,
    ) -> User:
        ...

    def consume_verification_token(self, *, verification_token_hash: str, now: datetime) -> User | None:
        ...

    def replace_verification_token(
        self,
        *,
        user_id: str,
        verification_token_hash: str,
        verification_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        ...

    def set_password_reset_token(
        self,
        *,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        now: datetime,
    ) -> None:
        ...

    def consume_password_reset_token(
        self,
        *,
        token_hash: str,
        password_hash: str,
        now: datetime,
    ) -> User | None:
        ...

    def clear_expired_password_reset_token(self, *, token_hash: str, now: datetime) -> bool:
        ...

    def clear_password_reset_token(self, *, user_id: str, token_hash: str, now: datetime) -> bool:
        ...

    def update_password_hash(self, *, user_id: str, password_hash: str, now: datetime) -> None:
        ...

    def update_subscription(self, *, user_id: str, subscription: Subscription, now: datetime) -> User | None:
        ...

    def update_avatar_url(self, *, user_id: str, avatar_url: str, now: datetime) -> None:
        ...

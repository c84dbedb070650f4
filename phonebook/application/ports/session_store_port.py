from __future__ import annotations

from datetime import datetime
from typing import Protocol

from phonebook.domain.entities.user import AuthSession


class SessionStorePort(Protocol):
    def get_session_by_user_id(self, *, user_id: str) -> AuthSession | None:
        ...

    def upsert_session(
        self,
        *,
        user_id: str,
        access_token_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
        now: datetime,
    ) -> AuthSession:
        """Create or overwrite the single session of ``user_id`` in one atomic write."""
        ...

    def replace_session_tokens(
        self,
        *,
        user_id: str,
        expected_refresh_token_hash: str,
        access_token_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
        now: datetime,
    ) -> AuthSession | None:
        """Swap the token pair only while the stored refresh hash still matches."""
        ...

    def delete_session(self, *, user_id: str, access_token_hash: str) -> bool:
        ...

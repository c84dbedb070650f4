from __future__ import annotations

from datetime import datetime
from typing import Literal, Protocol


TokenPurpose = Literal["access", "refresh"]


class TokenPort(Protocol):
    def create_access_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        ...

    def create_refresh_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        ...

    def verify_token(self, *, token: str, expected_purpose: TokenPurpose) -> str:
        ...

    def hash_session_token(self, *, token: str) -> str:
        ...

    def generate_recovery_token(self) -> str:
        ...

    def hash_recovery_token(self, *, token: str) -> str:
        ...

    def recovery_token_expires_at(self, *, now: datetime) -> datetime:
        ...

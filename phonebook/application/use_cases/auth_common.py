from __future__ import annotations

import hashlib
from datetime import datetime, timezone

from phonebook.application.dto.auth import AuthTokensOutput, AuthUserOutput
from phonebook.application.ports.session_store_port import SessionStorePort
from phonebook.application.ports.token_port import TokenPort
from phonebook.domain.entities.user import User


INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    # Uniqueness is case-sensitive; only surrounding whitespace is dropped.
    return email.strip()


def gravatar_url(email: str, size: int = 250) -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://s.gravatar.com/avatar/{digest}?s={size}&d=retro"


def build_auth_user_output(user: User) -> AuthUserOutput:
    return AuthUserOutput(
        id=user.id,
        name=user.name,
        email=user.email,
        subscription=user.subscription,
        avatar_url=user.avatar_url,
        email_verified=user.email_verified,
    )


def mint_token_pair(*, user_id: str, token_port: TokenPort, now: datetime):
    access_token, access_expires_at = token_port.create_access_token(user_id=user_id, now=now)
    refresh_token, refresh_expires_at = token_port.create_refresh_token(user_id=user_id, now=now)
    return access_token, access_expires_at, refresh_token, refresh_expires_at


def issue_tokens(
    *,
    user: User,
    session_store: SessionStorePort,
    token_port: TokenPort,
) -> AuthTokensOutput:
    now = utcnow()
    access_token, access_expires_at, refresh_token, refresh_expires_at = mint_token_pair(
        user_id=user.id,
        token_port=token_port,
        now=now,
    )
    session_store.upsert_session(
        user_id=user.id,
        access_token_hash=token_port.hash_session_token(token=access_token),
        refresh_token_hash=token_port.hash_session_token(token=refresh_token),
        expires_at=refresh_expires_at,
        now=now,
    )
    return AuthTokensOutput(
        user=build_auth_user_output(user),
        access_token=access_token,
        refresh_token=refresh_token,
        access_expires_at=access_expires_at,
        refresh_expires_at=refresh_expires_at,
    )

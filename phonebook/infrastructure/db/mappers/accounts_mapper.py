from __future__ import annotations

from typing import Any, Mapping

from phonebook.domain.entities.user import AuthSession, User


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        subscription=row["subscription"],
        avatar_url=row.get("avatar_url"),
        email_verified=bool(row["email_verified"]),
        verification_token_hash=row.get("verification_token_hash"),
        verification_token_expires_at=row.get("verification_token_expires_at"),
        password_reset_token_hash=row.get("password_reset_token_hash"),
        password_reset_expires_at=row.get("password_reset_expires_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def map_row_to_auth_session(row: Mapping[str, Any]) -> AuthSession:
    return AuthSession(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        access_token_hash=row["access_token_hash"],
        refresh_token_hash=row["refresh_token_hash"],
        expires_at=row["expires_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

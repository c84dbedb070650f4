from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from phonebook.application.ports.session_store_port import SessionStorePort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.entities.user import DEFAULT_SUBSCRIPTION
from phonebook.domain.exceptions import EmailAlreadyExistsError
from phonebook.infrastructure.db.mappers.accounts_mapper import map_row_to_auth_session, map_row_to_user


USER_COLUMNS = """
    id, name, email, password_hash, subscription, avatar_url, email_verified,
    verification_token_hash, verification_token_expires_at,
    password_reset_token_hash, password_reset_expires_at,
    created_at, updated_at
"""

SESSION_COLUMNS = "id, user_id, access_token_hash, refresh_token_hash, expires_at, created_at, updated_at"


class SqlAccountsRepository(UserStorePort, SessionStorePort):
    def __init__(self, engine):
        self._engine = engine

    def _fetch_user(self, sql: str, params: dict):
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), params).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        return self._fetch_user(sql, {"user_id": user_id})

    def get_user_by_email(self, *, email: str):
        sql = f"""
            SELECT {USER_COLUMNS}
            FROM public.users
            WHERE email = :email
            LIMIT 1
        """
        return self._fetch_user(sql, {"email": email})

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
    ):
        sql = f"""
            INSERT INTO public.users (
                id, name, email, password_hash, subscription, avatar_url, email_verified,
                verification_token_hash, verification_token_expires_at, created_at, updated_at
            ) VALUES (
                :id, :name, :email, :password_hash, :subscription, :avatar_url, false,
                :verification_token_hash, :verification_token_expires_at, :created_at, :updated_at
            )
            RETURNING {USER_COLUMNS}
        """
        params = {
            "id": user_id,
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "subscription": DEFAULT_SUBSCRIPTION,
            "avatar_url": avatar_url,
            "verification_token_hash": verification_token_hash,
            "verification_token_expires_at": verification_token_expires_at,
            "created_at": now,
            "updated_at": now,
        }
        try:
            with self._engine.begin() as conn:
                row = conn.execute(text(sql), params).mappings().one()
        except IntegrityError as exc:
            raise EmailAlreadyExistsError("Email in use") from exc
        return map_row_to_user(row)

    def consume_verification_token(self, *, verification_token_hash: str, now: datetime):
        sql = f"""
            UPDATE public.users
            SET email_verified = true,
                verification_token_hash = NULL,
                verification_token_expires_at = NULL,
                updated_at = :now
            WHERE verification_token_hash = :verification_token_hash
              AND verification_token_expires_at > :now
            RETURNING {USER_COLUMNS}
        """
        with self._engine.begin() as conn:
            row = conn.execute(
                text(sql),
                {"verification_token_hash": verification_token_hash, "now": now},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def replace_verification_token(
        self,
        *,
        user_id: str,
        verification_token_hash: str,
        verification_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        sql = """
            UPDATE public.users
            SET verification_token_hash = :verification_token_hash,
                verification_token_expires_at = :verification_token_expires_at,
                updated_at = :now
            WHERE id = :user_id
              AND email_verified = false
        """
        with self._engine.begin() as conn:
            result = conn.execute(
                text(sql),
                {
                    "user_id": user_id,
                    "verification_token_hash": verification_token_hash,
                    "verification_token_expires_at": verification_token_expires_at,
                    "now": now,
                },
            )
        return result.rowcount > 0

    def set_password_reset_token(
        self,
        *,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        now: datetime,
    ) -> None:
        sql = """
            UPDATE public.users
            SET password_reset_token_hash = :token_hash,
                password_reset_expires_at = :expires_at,
                updated_at = :now
            WHERE id = :user_id
        """
        with self._engine.begin() as conn:
            conn.execute(
                text(sql),
                {
                    "user_id": user_id,
                    "token_hash": token_hash,
                    "expires_at": expires_at,
                    "now": now,
                },
            )

    def consume_password_reset_token(
        self,
        *,
        token_hash: str,
        password_hash: str,
        now: datetime,
    ):
        sql = f"""
            UPDATE public.users
            SET password_hash = :password_hash,
                password_reset_token_hash = NULL,
                password_reset_expires_at = NULL,
                updated_at = :now
            WHERE password_reset_token_hash = :token_hash
              AND password_reset_expires_at IS NOT NULL
              AND password_reset_expires_at > :now
            RETURNING {USER_COLUMNS}
        """
        with self._engine.begin() as conn:
            row = conn.execute(
                text(sql),
                {"token_hash": token_hash, "password_hash": password_hash, "now": now},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def clear_expired_password_reset_token(self, *, token_hash: str, now: datetime) -> bool:
        sql = """
            UPDATE public.users
            SET password_reset_token_hash = NULL,
                password_reset_expires_at = NULL,
                updated_at = :now
            WHERE password_reset_token_hash = :token_hash
              AND (password_reset_expires_at IS NULL OR password_reset_expires_at <= :now)
        """
        with self._engine.begin() as conn:
            result = conn.execute(text(sql), {"token_hash": token_hash, "now": now})
        return result.rowcount > 0

    def clear_password_reset_token(self, *, user_id: str, token_hash: str, now: datetime) -> bool:
        sql = """
            UPDATE public.users
            SET password_reset_token_hash = NULL,
                password_reset_expires_at = NULL,
                updated_at = :now
            WHERE id = :user_id
              AND password_reset_token_hash = :token_hash
        """
        with self._engine.begin() as conn:
            result = conn.execute(
                text(sql),
                {"user_id": user_id, "token_hash": token_hash, "now": now},
            )
        return result.rowcount > 0

    def update_password_hash(self, *, user_id: str, password_hash: str, now: datetime) -> None:
        sql = """
            UPDATE public.users
            SET password_hash = :password_hash,
                updated_at = :now
            WHERE id = :user_id
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql), {"user_id": user_id, "password_hash": password_hash, "now": now})

    def update_subscription(self, *, user_id: str, subscription: str, now: datetime):
        sql = f"""
            UPDATE public.users
            SET subscription = :subscription,
                updated_at = :now
            WHERE id = :user_id
            RETURNING {USER_COLUMNS}
        """
        with self._engine.begin() as conn:
            row = conn.execute(
                text(sql),
                {"user_id": user_id, "subscription": subscription, "now": now},
            ).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def update_avatar_url(self, *, user_id: str, avatar_url: str, now: datetime) -> None:
        sql = """
            UPDATE public.users
            SET avatar_url = :avatar_url,
                updated_at = :now
            WHERE id = :user_id
        """
        with self._engine.begin() as conn:
            conn.execute(text(sql), {"user_id": user_id, "avatar_url": avatar_url, "now": now})

    def get_session_by_user_id(self, *, user_id: str):
        sql = f"""
            SELECT {SESSION_COLUMNS}
            FROM public.auth_sessions
            WHERE user_id = :user_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_auth_session(row)

    def upsert_session(
        self,
        *,
        user_id: str,
        access_token_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
        now: datetime,
    ):
        # Single statement: concurrent logins for one user serialize on the unique user_id.
        sql = f"""
            INSERT INTO public.auth_sessions (
                id, user_id, access_token_hash, refresh_token_hash, expires_at, created_at, updated_at
            ) VALUES (
                :id, :user_id, :access_token_hash, :refresh_token_hash, :expires_at, :now, :now
            )
            ON CONFLICT (user_id) DO UPDATE
            SET access_token_hash = EXCLUDED.access_token_hash,
                refresh_token_hash = EXCLUDED.refresh_token_hash,
                expires_at = EXCLUDED.expires_at,
                updated_at = EXCLUDED.updated_at
            RETURNING {SESSION_COLUMNS}
        """
        params = {
            "id": str(uuid4()),
            "user_id": user_id,
            "access_token_hash": access_token_hash,
            "refresh_token_hash": refresh_token_hash,
            "expires_at": expires_at,
            "now": now,
        }
        with self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().one()
        return map_row_to_auth_session(row)

    def replace_session_tokens(
        self,
        *,
        user_id: str,
        expected_refresh_token_hash: str,
        access_token_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
        now: datetime,
    ):
        sql = f"""
            UPDATE public.auth_sessions
            SET access_token_hash = :access_token_hash,
                refresh_token_hash = :refresh_token_hash,
                expires_at = :expires_at,
                updated_at = :now
            WHERE user_id = :user_id
              AND refresh_token_hash = :expected_refresh_token_hash
            RETURNING {SESSION_COLUMNS}
        """
        params = {
            "user_id": user_id,
            "expected_refresh_token_hash": expected_refresh_token_hash,
            "access_token_hash": access_token_hash,
            "refresh_token_hash": refresh_token_hash,
            "expires_at": expires_at,
            "now": now,
        }
        with self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().first()
        if row is None:
            return None
        return map_row_to_auth_session(row)

    def delete_session(self, *, user_id: str, access_token_hash: str) -> bool:
        sql = """
            DELETE FROM public.auth_sessions
            WHERE user_id = :user_id
              AND access_token_hash = :access_token_hash
        """
        with self._engine.begin() as conn:
            result = conn.execute(
                text(sql),
                {"user_id": user_id, "access_token_hash": access_token_hash},
            )
        return result.rowcount > 0

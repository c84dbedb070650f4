from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import uuid4

import jwt

from phonebook.application.ports.token_port import TokenPort, TokenPurpose
from phonebook.domain.exceptions import TokenExpiredError, TokenPurposeError, TokenSignatureError


JWT_ALGORITHM = "HS256"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


@dataclass(frozen=True)
class TokenServiceSettings:
    access_secret: str
    refresh_secret: str
    recovery_secret: str
    access_ttl_minutes: int
    refresh_ttl_days: int
    recovery_ttl_minutes: int

    def __post_init__(self):
        secrets_in_use = (self.access_secret, self.refresh_secret, self.recovery_secret)
        if not all(secrets_in_use):
            raise ValueError("Token secrets are required.")
        if len(set(secrets_in_use)) != len(secrets_in_use):
            raise ValueError("Token secrets must be distinct.")
        if min(self.access_ttl_minutes, self.refresh_ttl_days, self.recovery_ttl_minutes) <= 0:
            raise ValueError("Token lifetimes must be positive.")


class JwtTokenService(TokenPort):
    def __init__(self, settings: TokenServiceSettings):
        self._settings = settings
        self._secrets: dict[str, str] = {
            "access": settings.access_secret,
            "refresh": settings.refresh_secret,
        }
        self._lifetimes: dict[str, timedelta] = {
            "access": timedelta(minutes=settings.access_ttl_minutes),
            "refresh": timedelta(days=settings.refresh_ttl_days),
        }

    def _encode(self, *, user_id: str, purpose: TokenPurpose, now: datetime) -> tuple[str, datetime]:
        exp = now + self._lifetimes[purpose]
        payload = {
            "sub": user_id,
            "type": purpose,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, self._secrets[purpose], algorithm=JWT_ALGORITHM)
        return token, exp

    def create_access_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        return self._encode(user_id=user_id, purpose="access", now=now)

    def create_refresh_token(self, *, user_id: str, now: datetime) -> tuple[str, datetime]:
        return self._encode(user_id=user_id, purpose="refresh", now=now)

    def verify_token(self, *, token: str, expected_purpose: TokenPurpose) -> str:
        try:
            payload = jwt.decode(
                token,
                self._secrets[expected_purpose],
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(INVALID_TOKEN_MESSAGE) from exc
        except jwt.PyJWTError as exc:
            raise TokenSignatureError(INVALID_TOKEN_MESSAGE) from exc

        if payload.get("type") != expected_purpose:
            raise TokenPurposeError(INVALID_TOKEN_MESSAGE)

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise TokenSignatureError(INVALID_TOKEN_MESSAGE)
        return user_id

    def hash_session_token(self, *, token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def generate_recovery_token(self) -> str:
        return secrets.token_urlsafe(32)

    def hash_recovery_token(self, *, token: str) -> str:
        return hmac.new(
            self._settings.recovery_secret.encode("utf-8"),
            token.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def recovery_token_expires_at(self, *, now: datetime) -> datetime:
        return now + timedelta(minutes=self._settings.recovery_ttl_minutes)

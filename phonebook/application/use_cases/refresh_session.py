from __future__ import annotations

import hmac
import logging

from phonebook.application.dto.auth import AuthTokensOutput, RefreshSessionInput
from phonebook.application.ports.session_store_port import SessionStorePort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import InvalidTokenError, RefreshSessionInvalidError

from .auth_common import INVALID_TOKEN_MESSAGE, build_auth_user_output, mint_token_pair, utcnow


logger = logging.getLogger(__name__)


class RefreshSessionUseCase:
    def __init__(
        self,
        *,
        user_store: UserStorePort,
        session_store: SessionStorePort,
        token_port: TokenPort,
    ):
        self._user_store = user_store
        self._session_store = session_store
        self._token_port = token_port

    def execute(self, command: RefreshSessionInput) -> AuthTokensOutput:
        token = command.refresh_token.strip()
        if not token:
            raise RefreshSessionInvalidError("Missing refresh token.")

        try:
            user_id = self._token_port.verify_token(token=token, expected_purpose="refresh")
        except InvalidTokenError as exc:
            raise RefreshSessionInvalidError(INVALID_TOKEN_MESSAGE) from exc

        now = utcnow()
        refresh_hash = self._token_port.hash_session_token(token=token)
        session = self._session_store.get_session_by_user_id(user_id=user_id)
        if session is None or session.expires_at <= now:
            raise RefreshSessionInvalidError(INVALID_TOKEN_MESSAGE)
        if not hmac.compare_digest(session.refresh_token_hash, refresh_hash):
            raise RefreshSessionInvalidError(INVALID_TOKEN_MESSAGE)

        user = self._user_store.get_user_by_id(user_id=user_id)
        if user is None:
            raise RefreshSessionInvalidError(INVALID_TOKEN_MESSAGE)

        access_token, access_expires_at, refresh_token, refresh_expires_at = mint_token_pair(
            user_id=user.id,
            token_port=self._token_port,
            now=now,
        )
        replaced = self._session_store.replace_session_tokens(
            user_id=user.id,
            expected_refresh_token_hash=refresh_hash,
            access_token_hash=self._token_port.hash_session_token(token=access_token),
            refresh_token_hash=self._token_port.hash_session_token(token=refresh_token),
            expires_at=refresh_expires_at,
            now=now,
        )
        if replaced is None:
            logger.warning("refresh_session: lost_race user_id=%s", user.id)
            raise RefreshSessionInvalidError(INVALID_TOKEN_MESSAGE)

        logger.info("refresh_session: rotated user_id=%s", user.id)
        return AuthTokensOutput(
            user=build_auth_user_output(user),
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=access_expires_at,
            refresh_expires_at=refresh_expires_at,
        )

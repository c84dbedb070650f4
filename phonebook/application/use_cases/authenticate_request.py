from __future__ import annotations

import hmac

from phonebook.application.ports.session_store_port import SessionStorePort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.entities.user import User
from phonebook.domain.exceptions import MissingTokenError, NoSessionError, UnknownUserError

from .auth_common import INVALID_TOKEN_MESSAGE, utcnow


class AuthenticateRequestUseCase:
    """Resolve the acting user of a protected request.

    A valid signature is not enough: the token must also be the one held by
    the user's live session, so tokens superseded by a later login or
    orphaned by logout are rejected before they expire.
    """

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

    def execute(self, *, token: str | None) -> User:
        if not token:
            raise MissingTokenError("Access token missing")

        user_id = self._token_port.verify_token(token=token, expected_purpose="access")

        session = self._session_store.get_session_by_user_id(user_id=user_id)
        if session is None:
            raise NoSessionError(INVALID_TOKEN_MESSAGE)
        # Expiry is checked lazily here; nothing sweeps stale rows.
        if session.expires_at <= utcnow():
            raise NoSessionError(INVALID_TOKEN_MESSAGE)
        presented_hash = self._token_port.hash_session_token(token=token)
        if not hmac.compare_digest(session.access_token_hash, presented_hash):
            raise NoSessionError(INVALID_TOKEN_MESSAGE)

        user = self._user_store.get_user_by_id(user_id=user_id)
        if user is None:
            raise UnknownUserError(INVALID_TOKEN_MESSAGE)
        return user

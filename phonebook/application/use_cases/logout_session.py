from __future__ import annotations

import hmac
import logging

from phonebook.application.dto.auth import LogoutInput
from phonebook.application.ports.session_store_port import SessionStorePort
from phonebook.application.ports.token_port import TokenPort
from phonebook.domain.exceptions import MissingTokenError, NoActiveSessionError, NoSessionError

from .auth_common import INVALID_TOKEN_MESSAGE


logger = logging.getLogger(__name__)


class LogoutSessionUseCase:
    """Delete the caller's session.

    The access token only has to be cryptographically valid: a user whose
    session is already gone gets ``NoActiveSessionError`` on every repeat,
    while a token superseded by a newer login cannot end that newer session.
    """

    def __init__(self, *, session_store: SessionStorePort, token_port: TokenPort):
        self._session_store = session_store
        self._token_port = token_port

    def execute(self, command: LogoutInput) -> None:
        token = command.access_token.strip()
        if not token:
            raise MissingTokenError("Access token missing")

        user_id = self._token_port.verify_token(token=token, expected_purpose="access")
        access_hash = self._token_port.hash_session_token(token=token)

        if self._session_store.delete_session(user_id=user_id, access_token_hash=access_hash):
            logger.info("logout_session: deleted user_id=%s", user_id)
            return

        session = self._session_store.get_session_by_user_id(user_id=user_id)
        if session is None:
            raise NoActiveSessionError("No active session found")
        if not hmac.compare_digest(session.access_token_hash, access_hash):
            raise NoSessionError(INVALID_TOKEN_MESSAGE)
        # Lost a race with a concurrent login that rewrote the row; nothing left to end.
        raise NoActiveSessionError("No active session found")

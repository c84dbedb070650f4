from __future__ import annotations

import logging

from phonebook.application.dto.auth import VerifyEmailInput
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import VerificationTokenNotFoundError

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    def __init__(self, *, user_store: UserStorePort, token_port: TokenPort):
        self._user_store = user_store
        self._token_port = token_port

    def execute(self, command: VerifyEmailInput) -> None:
        token = command.verification_token.strip()
        if not token:
            raise VerificationTokenNotFoundError("User not found")

        token_hash = self._token_port.hash_recovery_token(token=token)
        user = self._user_store.consume_verification_token(verification_token_hash=token_hash, now=utcnow())
        if user is None:
            raise VerificationTokenNotFoundError("User not found")
        logger.info("verify_email: verified user_id=%s", user.id)

from __future__ import annotations

import logging

from phonebook.application.dto.auth import CompletePasswordResetInput
from phonebook.application.ports.password_hasher_port import PasswordHasherPort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import InvalidOrExpiredTokenError, PasswordMismatchError, ValidationError

from .auth_common import utcnow
from .register_user import MIN_PASSWORD_LENGTH


logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired token"


class CompletePasswordResetUseCase:
    def __init__(
        self,
        *,
        user_store: UserStorePort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._user_store = user_store
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: CompletePasswordResetInput) -> None:
        if command.new_password != command.retype_new_password:
            raise PasswordMismatchError("Passwords do not match")
        if len(command.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"password must have at least {MIN_PASSWORD_LENGTH} characters.")

        token = command.token.strip()
        if not token:
            raise InvalidOrExpiredTokenError(INVALID_RESET_TOKEN_MESSAGE)

        now = utcnow()
        token_hash = self._token_port.hash_recovery_token(token=token)
        user = self._user_store.consume_password_reset_token(
            token_hash=token_hash,
            password_hash=self._password_hasher.hash(command.new_password),
            now=now,
        )
        if user is None:
            if self._user_store.clear_expired_password_reset_token(token_hash=token_hash, now=now):
                logger.info("complete_password_reset: cleared_expired_token")
            raise InvalidOrExpiredTokenError(INVALID_RESET_TOKEN_MESSAGE)

        logger.info("complete_password_reset: success user_id=%s", user.id)

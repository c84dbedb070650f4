from __future__ import annotations

import logging

from phonebook.application.dto.auth import AuthTokensOutput, LoginLocalInput
from phonebook.application.ports.password_hasher_port import PasswordHasherPort
from phonebook.application.ports.session_store_port import SessionStorePort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import EmailNotVerifiedError, InvalidCredentialsError

from .auth_common import issue_tokens, normalize_email


logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Email or password is wrong"


class LoginLocalUseCase:
    def __init__(
        self,
        *,
        user_store: UserStorePort,
        session_store: SessionStorePort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
    ):
        self._user_store = user_store
        self._session_store = session_store
        self._password_hasher = password_hasher
        self._token_port = token_port

    def execute(self, command: LoginLocalInput) -> AuthTokensOutput:
        email = normalize_email(command.email)
        user = self._user_store.get_user_by_email(email=email)
        if user is None:
            self._password_hasher.dummy_verify()
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        if not user.email_verified:
            raise EmailNotVerifiedError("Please verify your email")

        if not self._password_hasher.verify(command.password, user.password_hash):
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        output = issue_tokens(
            user=user,
            session_store=self._session_store,
            token_port=self._token_port,
        )
        logger.info("login_local: success user_id=%s", user.id)
        return output

from __future__ import annotations

import logging

from phonebook.application.dto.me import ChangePasswordInput
from phonebook.application.ports.password_hasher_port import PasswordHasherPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import (
    InvalidCredentialsError,
    PasswordMismatchError,
    UnknownUserError,
    ValidationError,
)

from .auth_common import utcnow
from .register_user import MIN_PASSWORD_LENGTH


logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    def __init__(self, *, user_store: UserStorePort, password_hasher: PasswordHasherPort):
        self._user_store = user_store
        self._password_hasher = password_hasher

    def execute(self, command: ChangePasswordInput) -> None:
        if command.new_password != command.retype_new_password:
            raise PasswordMismatchError("Passwords do not match")
        if len(command.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"password must have at least {MIN_PASSWORD_LENGTH} characters.")

        user = self._user_store.get_user_by_id(user_id=command.user_id)
        if user is None:
            raise UnknownUserError("User not found")
        if not self._password_hasher.verify(command.current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is wrong")

        self._user_store.update_password_hash(
            user_id=user.id,
            password_hash=self._password_hasher.hash(command.new_password),
            now=utcnow(),
        )
        logger.info("change_password: success user_id=%s", user.id)

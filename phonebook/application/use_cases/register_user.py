from __future__ import annotations

import logging
from uuid import uuid4

from phonebook.application.dto.auth import RegisterUserInput, RegisterUserOutput
from phonebook.application.ports.email_sender_port import EmailSenderPort
from phonebook.application.ports.password_hasher_port import PasswordHasherPort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.application.use_cases.recovery_emails import send_verification_email
from phonebook.domain.exceptions import EmailAlreadyExistsError, ValidationError
from phonebook.shared.redaction import redact_email

from .auth_common import build_auth_user_output, gravatar_url, normalize_email, utcnow


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        user_store: UserStorePort,
        password_hasher: PasswordHasherPort,
        token_port: TokenPort,
        email_sender: EmailSenderPort,
        public_base_url: str,
    ):
        self._user_store = user_store
        self._password_hasher = password_hasher
        self._token_port = token_port
        self._email_sender = email_sender
        self._public_base_url = public_base_url

    def execute(self, command: RegisterUserInput) -> RegisterUserOutput:
        name = command.name.strip()
        email = normalize_email(command.email)
        password = command.password

        if not name:
            raise ValidationError("name is required.")
        if not email:
            raise ValidationError("email is required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"password must have at least {MIN_PASSWORD_LENGTH} characters.")

        if self._user_store.get_user_by_email(email=email) is not None:
            raise EmailAlreadyExistsError("Email in use")

        now = utcnow()
        verification_token = self._token_port.generate_recovery_token()
        user = self._user_store.create_user(
            user_id=str(uuid4()),
            name=name,
            email=email,
            password_hash=self._password_hasher.hash(password),
            avatar_url=gravatar_url(email),
            verification_token_hash=self._token_port.hash_recovery_token(token=verification_token),
            verification_token_expires_at=self._token_port.recovery_token_expires_at(now=now),
            now=now,
        )
        logger.info("register_user: created user_id=%s email=%s", user.id, redact_email(email))

        send_verification_email(
            email_sender=self._email_sender,
            public_base_url=self._public_base_url,
            to_email=user.email,
            verification_token=verification_token,
        )
        return RegisterUserOutput(user=build_auth_user_output(user))

from __future__ import annotations

import logging

from phonebook.application.dto.auth import ResendVerificationInput
from phonebook.application.ports.email_sender_port import EmailSenderPort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import AlreadyVerifiedError
from phonebook.shared.redaction import redact_email

from .auth_common import normalize_email, utcnow
from .recovery_emails import send_verification_email


logger = logging.getLogger(__name__)


class ResendVerificationUseCase:
    """Issue a fresh verification token and mail it.

    Unknown emails complete silently so the endpoint answers the same way
    whether or not an account exists.
    """

    def __init__(
        self,
        *,
        user_store: UserStorePort,
        token_port: TokenPort,
        email_sender: EmailSenderPort,
        public_base_url: str,
    ):
        self._user_store = user_store
        self._token_port = token_port
        self._email_sender = email_sender
        self._public_base_url = public_base_url

    def execute(self, command: ResendVerificationInput) -> None:
        email = normalize_email(command.email)
        user = self._user_store.get_user_by_email(email=email)
        if user is None:
            logger.info("resend_verification: unknown_email email=%s", redact_email(email))
            return
        if user.email_verified:
            raise AlreadyVerifiedError("Verification has already been passed")

        now = utcnow()
        token = self._token_port.generate_recovery_token()
        replaced = self._user_store.replace_verification_token(
            user_id=user.id,
            verification_token_hash=self._token_port.hash_recovery_token(token=token),
            verification_token_expires_at=self._token_port.recovery_token_expires_at(now=now),
            now=now,
        )
        if not replaced:
            # Verified between the read and the write.
            raise AlreadyVerifiedError("Verification has already been passed")

        send_verification_email(
            email_sender=self._email_sender,
            public_base_url=self._public_base_url,
            to_email=user.email,
            verification_token=token,
        )
        logger.info("resend_verification: sent user_id=%s", user.id)

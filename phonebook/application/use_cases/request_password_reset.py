from __future__ import annotations

import logging

from phonebook.application.dto.auth import RequestPasswordResetInput
from phonebook.application.ports.email_sender_port import EmailSenderPort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.domain.exceptions import EmailDeliveryError
from phonebook.shared.redaction import redact_email

from .auth_common import normalize_email, utcnow
from .recovery_emails import send_password_reset_email


logger = logging.getLogger(__name__)


class RequestPasswordResetUseCase:
    """Issue a password reset token and mail it.

    Unknown emails and failed deliveries both complete silently, so the
    caller cannot tell whether an account exists.
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

    def execute(self, command: RequestPasswordResetInput) -> None:
        email = normalize_email(command.email)
        user = self._user_store.get_user_by_email(email=email)
        if user is None:
            logger.info("request_password_reset: unknown_email email=%s", redact_email(email))
            return

        now = utcnow()
        token = self._token_port.generate_recovery_token()
        token_hash = self._token_port.hash_recovery_token(token=token)
        self._user_store.set_password_reset_token(
            user_id=user.id,
            token_hash=token_hash,
            expires_at=self._token_port.recovery_token_expires_at(now=now),
            now=now,
        )
        try:
            send_password_reset_email(
                email_sender=self._email_sender,
                public_base_url=self._public_base_url,
                to_email=user.email,
                reset_token=token,
            )
        except EmailDeliveryError:
            # Only this request's token is cleared; a newer one stays.
            self._user_store.clear_password_reset_token(user_id=user.id, token_hash=token_hash, now=utcnow())
            logger.warning(
                "request_password_reset: delivery_failed user_id=%s email=%s",
                user.id,
                redact_email(user.email),
            )
            return
        logger.info("request_password_reset: sent user_id=%s", user.id)

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from phonebook.application.dto.auth import (
    CompletePasswordResetInput,
    LoginLocalInput,
    RegisterUserInput,
    RequestPasswordResetInput,
    ResendVerificationInput,
    VerifyEmailInput,
)
from phonebook.application.use_cases.complete_password_reset import CompletePasswordResetUseCase
from phonebook.application.use_cases.login_local import LoginLocalUseCase
from phonebook.application.use_cases.register_user import RegisterUserUseCase
from phonebook.application.use_cases.request_password_reset import RequestPasswordResetUseCase
from phonebook.application.use_cases.resend_verification import ResendVerificationUseCase
from phonebook.application.use_cases.verify_email import VerifyEmailUseCase
from phonebook.domain.exceptions import (
    AlreadyVerifiedError,
    EmailDeliveryError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    PasswordMismatchError,
    VerificationTokenNotFoundError,
)


BASE_URL = "https://phonebook.test"


@pytest.fixture
def registered(accounts_store, password_hasher, token_service, email_sender):
    RegisterUserUseCase(
        user_store=accounts_store,
        password_hasher=password_hasher,
        token_port=token_service,
        email_sender=email_sender,
        public_base_url=BASE_URL,
    ).execute(RegisterUserInput(name="Alice", email="alice@example.com", password="secret1"))
    return accounts_store.get_user_by_email(email="alice@example.com")


@pytest.fixture
def verify(accounts_store, token_service) -> VerifyEmailUseCase:
    return VerifyEmailUseCase(user_store=accounts_store, token_port=token_service)


@pytest.fixture
def resend(accounts_store, token_service, email_sender) -> ResendVerificationUseCase:
    return ResendVerificationUseCase(
        user_store=accounts_store,
        token_port=token_service,
        email_sender=email_sender,
        public_base_url=BASE_URL,
    )


@pytest.fixture
def request_reset(accounts_store, token_service, email_sender) -> RequestPasswordResetUseCase:
    return RequestPasswordResetUseCase(
        user_store=accounts_store,
        token_port=token_service,
        email_sender=email_sender,
        public_base_url=BASE_URL,
    )


@pytest.fixture
def complete_reset(accounts_store, password_hasher, token_service) -> CompletePasswordResetUseCase:
    return CompletePasswordResetUseCase(
        user_store=accounts_store,
        password_hasher=password_hasher,
        token_port=token_service,
    )


def test_verify_email_is_single_use(verify, registered, accounts_store, email_sender):
    token = email_sender.last_verification_token()

    verify.execute(VerifyEmailInput(verification_token=token))

    user = accounts_store.get_user_by_id(user_id=registered.id)
    assert user.email_verified is True
    assert user.verification_token_hash is None
    with pytest.raises(VerificationTokenNotFoundError, match="User not found"):
        verify.execute(VerifyEmailInput(verification_token=token))


def test_verify_email_rejects_unknown_token(verify, registered):
    with pytest.raises(VerificationTokenNotFoundError):
        verify.execute(VerifyEmailInput(verification_token="unknown-token"))


def test_verify_email_rejects_expired_token(verify, registered, accounts_store, email_sender, token_settings):
    token = email_sender.last_verification_token()
    user = accounts_store.get_user_by_id(user_id=registered.id)
    assert user.verification_token_expires_at - user.created_at == timedelta(minutes=token_settings.recovery_ttl_minutes)
    accounts_store.users[user.id] = replace(
        user, verification_token_expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)
    )

    with pytest.raises(VerificationTokenNotFoundError, match="User not found"):
        verify.execute(VerifyEmailInput(verification_token=token))

    assert accounts_store.get_user_by_id(user_id=registered.id).email_verified is False


def test_resend_issues_a_fresh_expiry(resend, registered, accounts_store):
    user = accounts_store.get_user_by_id(user_id=registered.id)
    accounts_store.users[user.id] = replace(
        user, verification_token_expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)
    )

    resend.execute(ResendVerificationInput(email="alice@example.com"))

    assert accounts_store.get_user_by_id(user_id=registered.id).verification_token_expires_at > datetime.now(timezone.utc)


def test_resend_rotates_verification_token(resend, verify, registered, email_sender):
    first_token = email_sender.last_verification_token()

    resend.execute(ResendVerificationInput(email="alice@example.com"))

    rotated = email_sender.last_verification_token()
    assert rotated != first_token
    assert len(email_sender.sent) == 2
    with pytest.raises(VerificationTokenNotFoundError):
        verify.execute(VerifyEmailInput(verification_token=first_token))
    verify.execute(VerifyEmailInput(verification_token=rotated))


def test_resend_is_silent_for_unknown_email(resend, email_sender):
    resend.execute(ResendVerificationInput(email="nobody@example.com"))

    assert email_sender.sent == []


def test_resend_rejects_verified_account(resend, verify, registered, email_sender):
    verify.execute(VerifyEmailInput(verification_token=email_sender.last_verification_token()))

    with pytest.raises(AlreadyVerifiedError, match="Verification has already been passed"):
        resend.execute(ResendVerificationInput(email="alice@example.com"))


def test_password_reset_flow_changes_password_once(
    request_reset, complete_reset, registered, accounts_store, email_sender, token_service
):
    request_reset.execute(RequestPasswordResetInput(email="alice@example.com"))
    token = email_sender.last_reset_token()
    assert f"{BASE_URL}/reset-password?token={token}" in email_sender.sent[-1]["body"]

    stored = accounts_store.get_user_by_id(user_id=registered.id)
    assert stored.password_reset_token_hash == token_service.hash_recovery_token(token=token)

    complete_reset.execute(
        CompletePasswordResetInput(token=token, new_password="newpass1", retype_new_password="newpass1")
    )

    user = accounts_store.get_user_by_id(user_id=registered.id)
    assert user.password_hash == "hashed::newpass1"
    assert user.password_reset_token_hash is None
    assert user.password_reset_expires_at is None
    with pytest.raises(InvalidOrExpiredTokenError, match="Invalid or expired token"):
        complete_reset.execute(
            CompletePasswordResetInput(token=token, new_password="another1", retype_new_password="another1")
        )


def test_new_password_works_for_login_after_reset(
    request_reset, complete_reset, registered, accounts_store, password_hasher, token_service, email_sender
):
    accounts_store.users[registered.id] = replace(registered, email_verified=True)
    request_reset.execute(RequestPasswordResetInput(email="alice@example.com"))
    complete_reset.execute(
        CompletePasswordResetInput(
            token=email_sender.last_reset_token(), new_password="newpass1", retype_new_password="newpass1"
        )
    )
    login = LoginLocalUseCase(
        user_store=accounts_store,
        session_store=accounts_store,
        password_hasher=password_hasher,
        token_port=token_service,
    )

    with pytest.raises(InvalidCredentialsError):
        login.execute(LoginLocalInput(email="alice@example.com", password="secret1"))
    assert login.execute(LoginLocalInput(email="alice@example.com", password="newpass1")).access_token


def test_password_mismatch_is_rejected_before_token_lookup(complete_reset):
    class ExplodingStore:
        def __getattr__(self, name):
            raise AssertionError(f"store must not be touched: {name}")

    complete_reset._user_store = ExplodingStore()

    with pytest.raises(PasswordMismatchError, match="Passwords do not match"):
        complete_reset.execute(
            CompletePasswordResetInput(token="anything", new_password="newpass1", retype_new_password="newpass2")
        )


def test_expired_reset_token_is_rejected_and_cleared(
    request_reset, complete_reset, registered, accounts_store, email_sender
):
    request_reset.execute(RequestPasswordResetInput(email="alice@example.com"))
    token = email_sender.last_reset_token()
    user = accounts_store.get_user_by_id(user_id=registered.id)
    accounts_store.users[user.id] = replace(
        user, password_reset_expires_at=datetime.now(timezone.utc) - timedelta(seconds=1)
    )

    with pytest.raises(InvalidOrExpiredTokenError):
        complete_reset.execute(
            CompletePasswordResetInput(token=token, new_password="newpass1", retype_new_password="newpass1")
        )

    user = accounts_store.get_user_by_id(user_id=registered.id)
    assert user.password_hash == "hashed::secret1"
    assert user.password_reset_token_hash is None


def test_newer_reset_request_invalidates_older_token(
    request_reset, complete_reset, registered, email_sender
):
    request_reset.execute(RequestPasswordResetInput(email="alice@example.com"))
    older = email_sender.last_reset_token()
    request_reset.execute(RequestPasswordResetInput(email="alice@example.com"))

    with pytest.raises(InvalidOrExpiredTokenError):
        complete_reset.execute(
            CompletePasswordResetInput(token=older, new_password="newpass1", retype_new_password="newpass1")
        )


def test_reset_request_is_silent_for_unknown_email(request_reset, email_sender):
    request_reset.execute(RequestPasswordResetInput(email="nobody@example.com"))

    assert email_sender.sent == []


def test_reset_request_with_failed_delivery_completes_and_clears_token(
    registered, accounts_store, token_service
):
    class FailingEmailSender:
        def send(self, *, to_email: str, subject: str, text_body: str) -> None:
            raise EmailDeliveryError("Could not send email")

    use_case = RequestPasswordResetUseCase(
        user_store=accounts_store,
        token_port=token_service,
        email_sender=FailingEmailSender(),
        public_base_url=BASE_URL,
    )

    use_case.execute(RequestPasswordResetInput(email="alice@example.com"))

    user = accounts_store.get_user_by_id(user_id=registered.id)
    assert user.password_reset_token_hash is None
    assert user.password_reset_expires_at is None

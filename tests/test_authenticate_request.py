from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from phonebook.application.dto.auth import LoginLocalInput, LogoutInput
from phonebook.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from phonebook.application.use_cases.login_local import LoginLocalUseCase
from phonebook.application.use_cases.logout_session import LogoutSessionUseCase
from phonebook.domain.exceptions import (
    MissingTokenError,
    NoSessionError,
    TokenExpiredError,
    TokenSignatureError,
    UnknownUserError,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def user(accounts_store, password_hasher):
    created = accounts_store.create_user(
        user_id="user-1",
        name="Alice",
        email="alice@example.com",
        password_hash=password_hasher.hash("secret1"),
        avatar_url=None,
        verification_token_hash="pending",
        verification_token_expires_at=_now() + timedelta(minutes=30),
        now=_now(),
    )
    verified = replace(created, email_verified=True, verification_token_hash=None, verification_token_expires_at=None)
    accounts_store.users[verified.id] = verified
    return verified


@pytest.fixture
def login(accounts_store, password_hasher, token_service, user):
    use_case = LoginLocalUseCase(
        user_store=accounts_store,
        session_store=accounts_store,
        password_hasher=password_hasher,
        token_port=token_service,
    )
    return lambda: use_case.execute(LoginLocalInput(email=user.email, password="secret1"))


@pytest.fixture
def guard(accounts_store, token_service) -> AuthenticateRequestUseCase:
    return AuthenticateRequestUseCase(
        user_store=accounts_store,
        session_store=accounts_store,
        token_port=token_service,
    )


def test_guard_returns_user_for_live_session(guard, login, user):
    tokens = login()

    assert guard.execute(token=tokens.access_token).id == user.id


def test_guard_rejects_missing_token(guard):
    with pytest.raises(MissingTokenError, match="Access token missing"):
        guard.execute(token=None)
    with pytest.raises(MissingTokenError):
        guard.execute(token="")


def test_guard_rejects_malformed_and_refresh_tokens(guard, login):
    tokens = login()

    with pytest.raises(TokenSignatureError):
        guard.execute(token="garbage")
    with pytest.raises(TokenSignatureError):
        guard.execute(token=tokens.refresh_token)


def test_guard_rejects_expired_access_token(guard, token_service, user):
    expired, _ = token_service.create_access_token(user_id=user.id, now=_now() - timedelta(hours=1))

    with pytest.raises(TokenExpiredError):
        guard.execute(token=expired)


def test_guard_rejects_token_superseded_by_newer_login(guard, login):
    first = login()
    second = login()

    with pytest.raises(NoSessionError, match="Invalid or expired token"):
        guard.execute(token=first.access_token)
    assert guard.execute(token=second.access_token)


def test_guard_rejects_token_orphaned_by_logout(guard, login, accounts_store, token_service):
    tokens = login()
    LogoutSessionUseCase(session_store=accounts_store, token_port=token_service).execute(
        LogoutInput(access_token=tokens.access_token)
    )

    with pytest.raises(NoSessionError):
        guard.execute(token=tokens.access_token)


def test_guard_rejects_signed_token_without_session(guard, token_service, user):
    token, _ = token_service.create_access_token(user_id=user.id, now=_now())

    with pytest.raises(NoSessionError):
        guard.execute(token=token)


def test_guard_rejects_expired_session(guard, login, accounts_store, user):
    tokens = login()
    accounts_store.sessions[user.id] = replace(
        accounts_store.sessions[user.id], expires_at=_now() - timedelta(minutes=1)
    )

    with pytest.raises(NoSessionError):
        guard.execute(token=tokens.access_token)


def test_guard_rejects_session_of_deleted_user(guard, login, accounts_store, user):
    tokens = login()
    del accounts_store.users[user.id]

    with pytest.raises(UnknownUserError):
        guard.execute(token=tokens.access_token)

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from threading import Lock
from uuid import uuid4

import pytest

from phonebook.domain.entities.contact import Contact
from phonebook.domain.entities.user import DEFAULT_SUBSCRIPTION, AuthSession, User
from phonebook.domain.exceptions import EmailAlreadyExistsError
from phonebook.infrastructure.security.token_service import JwtTokenService, TokenServiceSettings


class FakeAccountsStore:
    """In-memory user and session store with the same write rules as the SQL repository."""

    def __init__(self):
        self.users: dict[str, User] = {}
        self.sessions: dict[str, AuthSession] = {}
        self._lock = Lock()

    def _find_user(self, **criteria) -> User | None:
        for user in self.users.values():
            if all(getattr(user, key) == value for key, value in criteria.items()):
                return user
        return None

    def get_user_by_id(self, *, user_id: str) -> User | None:
        return self.users.get(user_id)

    def get_user_by_email(self, *, email: str) -> User | None:
        return self._find_user(email=email)

    def create_user(
        self,
        *,
        user_id: str,
        name: str,
        email: str,
        password_hash: str,
        avatar_url: str | None,
        verification_token_hash: str,
        verification_token_expires_at: datetime,
        now: datetime,
    ) -> User:
        with self._lock:
            if self._find_user(email=email) is not None:
                raise EmailAlreadyExistsError("Email in use")
            user = User(
                id=user_id,
                name=name,
                email=email,
                password_hash=password_hash,
                subscription=DEFAULT_SUBSCRIPTION,
                avatar_url=avatar_url,
                email_verified=False,
                verification_token_hash=verification_token_hash,
                verification_token_expires_at=verification_token_expires_at,
                password_reset_token_hash=None,
                password_reset_expires_at=None,
                created_at=now,
                updated_at=now,
            )
            self.users[user.id] = user
            return user

    def _update(self, user_id: str, now: datetime, **changes) -> User:
        user = replace(self.users[user_id], updated_at=now, **changes)
        self.users[user_id] = user
        return user

    def consume_verification_token(self, *, verification_token_hash: str, now: datetime) -> User | None:
        with self._lock:
            user = self._find_user(verification_token_hash=verification_token_hash)
            if user is None or user.verification_token_expires_at is None or user.verification_token_expires_at <= now:
                return None
            return self._update(
                user.id,
                now,
                email_verified=True,
                verification_token_hash=None,
                verification_token_expires_at=None,
            )

    def replace_verification_token(
        self,
        *,
        user_id: str,
        verification_token_hash: str,
        verification_token_expires_at: datetime,
        now: datetime,
    ) -> bool:
        with self._lock:
            user = self.users.get(user_id)
            if user is None or user.email_verified:
                return False
            self._update(
                user_id,
                now,
                verification_token_hash=verification_token_hash,
                verification_token_expires_at=verification_token_expires_at,
            )
            return True

    def set_password_reset_token(self, *, user_id: str, token_hash: str, expires_at: datetime, now: datetime) -> None:
        with self._lock:
            self._update(
                user_id,
                now,
                password_reset_token_hash=token_hash,
                password_reset_expires_at=expires_at,
            )

    def consume_password_reset_token(self, *, token_hash: str, password_hash: str, now: datetime) -> User | None:
        with self._lock:
            user = self._find_user(password_reset_token_hash=token_hash)
            if user is None or user.password_reset_expires_at is None or user.password_reset_expires_at <= now:
                return None
            return self._update(
                user.id,
                now,
                password_hash=password_hash,
                password_reset_token_hash=None,
                password_reset_expires_at=None,
            )

    def clear_expired_password_reset_token(self, *, token_hash: str, now: datetime) -> bool:
        with self._lock:
            user = self._find_user(password_reset_token_hash=token_hash)
            if user is None:
                return False
            if user.password_reset_expires_at is not None and user.password_reset_expires_at > now:
                return False
            self._update(user.id, now, password_reset_token_hash=None, password_reset_expires_at=None)
            return True

    def clear_password_reset_token(self, *, user_id: str, token_hash: str, now: datetime) -> bool:
        with self._lock:
            user = self.users.get(user_id)
            if user is None or user.password_reset_token_hash != token_hash:
                return False
            self._update(user_id, now, password_reset_token_hash=None, password_reset_expires_at=None)
            return True

    def update_password_hash(self, *, user_id: str, password_hash: str, now: datetime) -> None:
        with self._lock:
            self._update(user_id, now, password_hash=password_hash)

    def update_subscription(self, *, user_id: str, subscription: str, now: datetime) -> User | None:
        with self._lock:
            if user_id not in self.users:
                return None
            return self._update(user_id, now, subscription=subscription)

    def update_avatar_url(self, *, user_id: str, avatar_url: str, now: datetime) -> None:
        with self._lock:
            self._update(user_id, now, avatar_url=avatar_url)

    def get_session_by_user_id(self, *, user_id: str) -> AuthSession | None:
        return self.sessions.get(user_id)

    def upsert_session(
        self,
        *,
        user_id: str,
        access_token_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
        now: datetime,
    ) -> AuthSession:
        with self._lock:
            existing = self.sessions.get(user_id)
            session = AuthSession(
                id=existing.id if existing else str(uuid4()),
                user_id=user_id,
                access_token_hash=access_token_hash,
                refresh_token_hash=refresh_token_hash,
                expires_at=expires_at,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            self.sessions[user_id] = session
            return session

    def replace_session_tokens(
        self,
        *,
        user_id: str,
        expected_refresh_token_hash: str,
        access_token_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
        now: datetime,
    ) -> AuthSession | None:
        with self._lock:
            existing = self.sessions.get(user_id)
            if existing is None or existing.refresh_token_hash != expected_refresh_token_hash:
                return None
            session = replace(
                existing,
                access_token_hash=access_token_hash,
                refresh_token_hash=refresh_token_hash,
                expires_at=expires_at,
                updated_at=now,
            )
            self.sessions[user_id] = session
            return session

    def delete_session(self, *, user_id: str, access_token_hash: str) -> bool:
        with self._lock:
            existing = self.sessions.get(user_id)
            if existing is None or existing.access_token_hash != access_token_hash:
                return False
            del self.sessions[user_id]
            return True


class FakePasswordHasher:
    def __init__(self):
        self.dummy_calls = 0

    def hash(self, plain_password: str) -> str:
        return f"hashed::{plain_password}"

    def verify(self, plain_password: str, password_hash: str) -> bool:
        return password_hash == f"hashed::{plain_password}"

    def dummy_verify(self) -> None:
        self.dummy_calls += 1


class RecordingEmailSender:
    def __init__(self):
        self.sent: list[dict[str, str]] = []

    def send(self, *, to_email: str, subject: str, text_body: str) -> None:
        self.sent.append({"to": to_email, "subject": subject, "body": text_body})

    def last_verification_token(self) -> str:
        body = next(msg["body"] for msg in reversed(self.sent) if msg["subject"] == "Verify your email")
        return body.rsplit("/", 1)[-1].strip()

    def last_reset_token(self) -> str:
        body = next(msg["body"] for msg in reversed(self.sent) if msg["subject"] == "Reset your password")
        return body.split("token=", 1)[1].splitlines()[0].strip()


class FakeContactsStore:
    def __init__(self):
        self.contacts: dict[str, Contact] = {}

    def list_contacts(self, *, owner_id: str, offset: int, limit: int, favorite: bool | None) -> list[Contact]:
        rows = [
            contact
            for contact in self.contacts.values()
            if contact.owner_id == owner_id and (favorite is None or contact.favorite == favorite)
        ]
        rows.sort(key=lambda row: (row.created_at, row.id))
        return rows[offset : offset + limit]

    def get_contact(self, *, contact_id: str) -> Contact | None:
        return self.contacts.get(contact_id)

    def create_contact(
        self,
        *,
        contact_id: str,
        owner_id: str,
        name: str,
        email: str,
        phone: str,
        favorite: bool,
        now: datetime,
    ) -> Contact:
        contact = Contact(
            id=contact_id,
            owner_id=owner_id,
            name=name,
            email=email,
            phone=phone,
            favorite=favorite,
            created_at=now,
            updated_at=now,
        )
        self.contacts[contact_id] = contact
        return contact

    def update_contact(self, *, contact_id: str, fields: dict[str, object], now: datetime) -> Contact | None:
        contact = self.contacts.get(contact_id)
        if contact is None:
            return None
        contact = replace(contact, updated_at=now, **fields)
        self.contacts[contact_id] = contact
        return contact

    def delete_contact(self, *, contact_id: str) -> bool:
        return self.contacts.pop(contact_id, None) is not None


class FakeAvatarProcessor:
    def __init__(self):
        self.calls: list[dict[str, object]] = []

    def process(self, *, content: bytes, filename: str, user_id: str) -> str:
        self.calls.append({"content": content, "filename": filename, "user_id": user_id})
        return f"/avatars/{user_id}{filename[filename.rfind('.'):]}"


@pytest.fixture
def token_settings() -> TokenServiceSettings:
    return TokenServiceSettings(
        access_secret="test-access-secret",
        refresh_secret="test-refresh-secret",
        recovery_secret="test-recovery-secret",
        access_ttl_minutes=15,
        refresh_ttl_days=7,
        recovery_ttl_minutes=30,
    )


@pytest.fixture
def token_service(token_settings: TokenServiceSettings) -> JwtTokenService:
    return JwtTokenService(token_settings)


@pytest.fixture
def accounts_store() -> FakeAccountsStore:
    return FakeAccountsStore()


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def contacts_store() -> FakeContactsStore:
    return FakeContactsStore()


@pytest.fixture
def avatar_processor() -> FakeAvatarProcessor:
    return FakeAvatarProcessor()

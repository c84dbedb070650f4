from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Header, HTTPException

from phonebook.api.errors import raise_http
from phonebook.application.ports.avatar_processor_port import AvatarProcessorPort
from phonebook.application.ports.contacts_port import ContactsPort
from phonebook.application.ports.email_sender_port import EmailSenderPort
from phonebook.application.ports.password_hasher_port import PasswordHasherPort
from phonebook.application.ports.session_store_port import SessionStorePort
from phonebook.application.ports.token_port import TokenPort
from phonebook.application.ports.user_store_port import UserStorePort
from phonebook.application.use_cases.authenticate_request import AuthenticateRequestUseCase
from phonebook.application.use_cases.change_password import ChangePasswordUseCase
from phonebook.application.use_cases.complete_password_reset import CompletePasswordResetUseCase
from phonebook.application.use_cases.contacts import (
    CreateContactUseCase,
    GetContactUseCase,
    ListContactsUseCase,
    RemoveContactUseCase,
    UpdateContactUseCase,
)
from phonebook.application.use_cases.get_me import GetMeUseCase
from phonebook.application.use_cases.login_local import LoginLocalUseCase
from phonebook.application.use_cases.logout_session import LogoutSessionUseCase
from phonebook.application.use_cases.refresh_session import RefreshSessionUseCase
from phonebook.application.use_cases.register_user import RegisterUserUseCase
from phonebook.application.use_cases.request_password_reset import RequestPasswordResetUseCase
from phonebook.application.use_cases.resend_verification import ResendVerificationUseCase
from phonebook.application.use_cases.update_avatar import UpdateAvatarUseCase
from phonebook.application.use_cases.update_subscription import UpdateSubscriptionUseCase
from phonebook.application.use_cases.verify_email import VerifyEmailUseCase
from phonebook.domain.entities.user import User
from phonebook.domain.exceptions import DomainError
from phonebook.infrastructure.clients.smtp_email_client import SmtpEmailClient, SmtpEmailClientSettings
from phonebook.infrastructure.db.engine import get_engine
from phonebook.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from phonebook.infrastructure.db.repositories.contacts_repository import SqlContactsRepository
from phonebook.infrastructure.media.avatar_processor import AvatarProcessorSettings, PillowAvatarProcessor
from phonebook.infrastructure.security.password_hasher import PasswordHasher
from phonebook.infrastructure.security.token_service import JwtTokenService, TokenServiceSettings
from phonebook.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _required(value, env_name: str):
    if value is None or value == "":
        raise HTTPException(status_code=500, detail=f"{env_name} is required.")
    return value


@lru_cache(maxsize=1)
def _build_token_service() -> JwtTokenService:
    settings = get_settings()
    try:
        token_settings = TokenServiceSettings(
            access_secret=_required(settings.jwt_access_secret, "JWT_ACCESS_SECRET"),
            refresh_secret=_required(settings.jwt_refresh_secret, "JWT_REFRESH_SECRET"),
            recovery_secret=_required(settings.recovery_token_secret, "RECOVERY_TOKEN_SECRET"),
            access_ttl_minutes=_required(settings.jwt_access_ttl_minutes, "JWT_ACCESS_TTL_MINUTES"),
            refresh_ttl_days=_required(settings.jwt_refresh_ttl_days, "JWT_REFRESH_TTL_DAYS"),
            recovery_ttl_minutes=_required(settings.recovery_token_ttl_minutes, "RECOVERY_TOKEN_TTL_MINUTES"),
        )
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return JwtTokenService(token_settings)


@lru_cache(maxsize=1)
def _build_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@lru_cache(maxsize=1)
def _build_email_sender() -> SmtpEmailClient:
    settings = get_settings()
    try:
        smtp_settings = SmtpEmailClientSettings(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            from_email=settings.email_from,
        )
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return SmtpEmailClient(smtp_settings)


@lru_cache(maxsize=1)
def _build_avatar_processor() -> PillowAvatarProcessor:
    settings = get_settings()
    return PillowAvatarProcessor(
        AvatarProcessorSettings(
            avatars_dir=Path(settings.avatars_dir),
            size_px=settings.avatar_size_px,
            max_bytes=settings.avatar_max_bytes,
        )
    )


def get_token_service() -> TokenPort:
    return _build_token_service()


def get_password_hasher() -> PasswordHasherPort:
    return _build_password_hasher()


def get_email_sender() -> EmailSenderPort:
    return _build_email_sender()


def get_avatar_processor() -> AvatarProcessorPort:
    return _build_avatar_processor()


def get_avatar_max_bytes() -> int:
    return get_settings().avatar_max_bytes


def get_public_base_url() -> str:
    return get_settings().public_base_url


def get_user_store() -> UserStorePort:
    return SqlAccountsRepository(_get_db_engine())


def get_session_store() -> SessionStorePort:
    return SqlAccountsRepository(_get_db_engine())


def get_contacts_port() -> ContactsPort:
    return SqlContactsRepository(_get_db_engine())


def get_register_user_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
    email_sender: EmailSenderPort = Depends(get_email_sender),
    public_base_url: str = Depends(get_public_base_url),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        user_store=user_store,
        password_hasher=password_hasher,
        token_port=token_port,
        email_sender=email_sender,
        public_base_url=public_base_url,
    )


def get_verify_email_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    token_port: TokenPort = Depends(get_token_service),
) -> VerifyEmailUseCase:
    return VerifyEmailUseCase(user_store=user_store, token_port=token_port)


def get_resend_verification_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    token_port: TokenPort = Depends(get_token_service),
    email_sender: EmailSenderPort = Depends(get_email_sender),
    public_base_url: str = Depends(get_public_base_url),
) -> ResendVerificationUseCase:
    return ResendVerificationUseCase(
        user_store=user_store,
        token_port=token_port,
        email_sender=email_sender,
        public_base_url=public_base_url,
    )


def get_login_local_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    session_store: SessionStorePort = Depends(get_session_store),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> LoginLocalUseCase:
    return LoginLocalUseCase(
        user_store=user_store,
        session_store=session_store,
        password_hasher=password_hasher,
        token_port=token_port,
    )


def get_refresh_session_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    session_store: SessionStorePort = Depends(get_session_store),
    token_port: TokenPort = Depends(get_token_service),
) -> RefreshSessionUseCase:
    return RefreshSessionUseCase(user_store=user_store, session_store=session_store, token_port=token_port)


def get_logout_session_use_case(
    session_store: SessionStorePort = Depends(get_session_store),
    token_port: TokenPort = Depends(get_token_service),
) -> LogoutSessionUseCase:
    return LogoutSessionUseCase(session_store=session_store, token_port=token_port)


def get_request_password_reset_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    token_port: TokenPort = Depends(get_token_service),
    email_sender: EmailSenderPort = Depends(get_email_sender),
    public_base_url: str = Depends(get_public_base_url),
) -> RequestPasswordResetUseCase:
    return RequestPasswordResetUseCase(
        user_store=user_store,
        token_port=token_port,
        email_sender=email_sender,
        public_base_url=public_base_url,
    )


def get_complete_password_reset_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
    token_port: TokenPort = Depends(get_token_service),
) -> CompletePasswordResetUseCase:
    return CompletePasswordResetUseCase(
        user_store=user_store,
        password_hasher=password_hasher,
        token_port=token_port,
    )


def get_authenticate_request_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    session_store: SessionStorePort = Depends(get_session_store),
    token_port: TokenPort = Depends(get_token_service),
) -> AuthenticateRequestUseCase:
    return AuthenticateRequestUseCase(user_store=user_store, session_store=session_store, token_port=token_port)


def get_get_me_use_case() -> GetMeUseCase:
    return GetMeUseCase()


def get_update_subscription_use_case(
    user_store: UserStorePort = Depends(get_user_store),
) -> UpdateSubscriptionUseCase:
    return UpdateSubscriptionUseCase(user_store=user_store)


def get_change_password_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    password_hasher: PasswordHasherPort = Depends(get_password_hasher),
) -> ChangePasswordUseCase:
    return ChangePasswordUseCase(user_store=user_store, password_hasher=password_hasher)


def get_update_avatar_use_case(
    user_store: UserStorePort = Depends(get_user_store),
    avatar_processor: AvatarProcessorPort = Depends(get_avatar_processor),
) -> UpdateAvatarUseCase:
    return UpdateAvatarUseCase(user_store=user_store, avatar_processor=avatar_processor)


def get_list_contacts_use_case(contacts_port: ContactsPort = Depends(get_contacts_port)) -> ListContactsUseCase:
    return ListContactsUseCase(contacts_port=contacts_port)


def get_get_contact_use_case(contacts_port: ContactsPort = Depends(get_contacts_port)) -> GetContactUseCase:
    return GetContactUseCase(contacts_port=contacts_port)


def get_create_contact_use_case(contacts_port: ContactsPort = Depends(get_contacts_port)) -> CreateContactUseCase:
    return CreateContactUseCase(contacts_port=contacts_port)


def get_update_contact_use_case(contacts_port: ContactsPort = Depends(get_contacts_port)) -> UpdateContactUseCase:
    return UpdateContactUseCase(contacts_port=contacts_port)


def get_remove_contact_use_case(contacts_port: ContactsPort = Depends(get_contacts_port)) -> RemoveContactUseCase:
    return RemoveContactUseCase(contacts_port=contacts_port)


def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_user(
    token: str | None = Depends(get_bearer_token),
    use_case: AuthenticateRequestUseCase = Depends(get_authenticate_request_use_case),
) -> User:
    try:
        return use_case.execute(token=token)
    except DomainError as exc:
        raise_http(exc)

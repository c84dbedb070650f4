from __future__ import annotations

from fastapi import APIRouter, Depends

from phonebook.api.deps import (
    get_bearer_token,
    get_complete_password_reset_use_case,
    get_login_local_use_case,
    get_logout_session_use_case,
    get_refresh_session_use_case,
    get_register_user_use_case,
    get_request_password_reset_use_case,
    get_resend_verification_use_case,
    get_verify_email_use_case,
)
from phonebook.api.errors import raise_http
from phonebook.api.schemas.auth import (
    AuthTokenResponse,
    AuthUserResponse,
    EmailRequest,
    ForgotPasswordResetRequest,
    LoginRequest,
    RefreshRequest,
    SignupRequest,
    SignupResponse,
)
from phonebook.api.schemas.common import MessageResponse
from phonebook.application.dto.auth import (
    AuthTokensOutput,
    AuthUserOutput,
    CompletePasswordResetInput,
    LoginLocalInput,
    LogoutInput,
    RefreshSessionInput,
    RegisterUserInput,
    RequestPasswordResetInput,
    ResendVerificationInput,
    VerifyEmailInput,
)
from phonebook.application.use_cases.complete_password_reset import CompletePasswordResetUseCase
from phonebook.application.use_cases.login_local import LoginLocalUseCase
from phonebook.application.use_cases.logout_session import LogoutSessionUseCase
from phonebook.application.use_cases.refresh_session import RefreshSessionUseCase
from phonebook.application.use_cases.register_user import RegisterUserUseCase
from phonebook.application.use_cases.request_password_reset import RequestPasswordResetUseCase
from phonebook.application.use_cases.resend_verification import ResendVerificationUseCase
from phonebook.application.use_cases.verify_email import VerifyEmailUseCase
from phonebook.domain.exceptions import DomainError, MissingTokenError


router = APIRouter(prefix="/api/users", tags=["auth"])

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent"


def _user_response(user: AuthUserOutput) -> AuthUserResponse:
    return AuthUserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        subscription=user.subscription,
        avatar_url=user.avatar_url,
        verified=user.email_verified,
    )


def _token_response(output: AuthTokensOutput) -> AuthTokenResponse:
    return AuthTokenResponse(
        access_token=output.access_token,
        refresh_token=output.refresh_token,
        access_expires_at=output.access_expires_at,
        refresh_expires_at=output.refresh_expires_at,
        user=_user_response(output.user),
    )


@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(
    req: SignupRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    try:
        output = use_case.execute(RegisterUserInput(name=req.name, email=req.email, password=req.password))
    except DomainError as exc:
        raise_http(exc)
    return SignupResponse(user=_user_response(output.user))


@router.get("/verify/{verification_token}", response_model=MessageResponse)
def verify_email(
    verification_token: str,
    use_case: VerifyEmailUseCase = Depends(get_verify_email_use_case),
):
    try:
        use_case.execute(VerifyEmailInput(verification_token=verification_token))
    except DomainError as exc:
        raise_http(exc)
    return MessageResponse(message="Verification successful")


@router.post("/verify", response_model=MessageResponse)
def resend_verification(
    req: EmailRequest,
    use_case: ResendVerificationUseCase = Depends(get_resend_verification_use_case),
):
    try:
        use_case.execute(ResendVerificationInput(email=req.email))
    except DomainError as exc:
        raise_http(exc)
    return MessageResponse(message="Verification email sent")


@router.post("/login", response_model=AuthTokenResponse)
def login_local(
    req: LoginRequest,
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    try:
        output = use_case.execute(LoginLocalInput(email=req.email, password=req.password))
    except DomainError as exc:
        raise_http(exc)
    return _token_response(output)


@router.post("/refresh", response_model=AuthTokenResponse)
def refresh_auth(
    req: RefreshRequest,
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    try:
        output = use_case.execute(RefreshSessionInput(refresh_token=req.refresh_token))
    except DomainError as exc:
        raise_http(exc)
    return _token_response(output)


@router.get("/logout", response_model=MessageResponse)
def logout_auth(
    token: str | None = Depends(get_bearer_token),
    use_case: LogoutSessionUseCase = Depends(get_logout_session_use_case),
):
    try:
        if token is None:
            raise MissingTokenError("Access token missing")
        use_case.execute(LogoutInput(access_token=token))
    except DomainError as exc:
        raise_http(exc)
    return MessageResponse(message="Logout successful")


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    req: EmailRequest,
    use_case: RequestPasswordResetUseCase = Depends(get_request_password_reset_use_case),
):
    try:
        use_case.execute(RequestPasswordResetInput(email=req.email))
    except DomainError as exc:
        raise_http(exc)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.patch("/forgot-password-reset", response_model=MessageResponse)
def forgot_password_reset(
    req: ForgotPasswordResetRequest,
    use_case: CompletePasswordResetUseCase = Depends(get_complete_password_reset_use_case),
):
    try:
        use_case.execute(
            CompletePasswordResetInput(
                token=req.token,
                new_password=req.new_password,
                retype_new_password=req.retype_new_password,
            )
        )
    except DomainError as exc:
        raise_http(exc)
    return MessageResponse(message="Password reset successful")

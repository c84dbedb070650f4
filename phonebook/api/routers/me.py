from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from phonebook.api.deps import (
    get_avatar_max_bytes,
    get_change_password_use_case,
    get_current_user,
    get_get_me_use_case,
    get_update_avatar_use_case,
    get_update_subscription_use_case,
)
from phonebook.api.errors import raise_http
from phonebook.api.schemas.common import MessageResponse
from phonebook.api.schemas.me import (
    AvatarResponse,
    ChangePasswordRequest,
    MeResponse,
    SubscriptionRequest,
    SubscriptionResponse,
)
from phonebook.application.dto.me import ChangePasswordInput, UpdateAvatarInput, UpdateSubscriptionInput
from phonebook.application.use_cases.change_password import ChangePasswordUseCase
from phonebook.application.use_cases.get_me import GetMeUseCase
from phonebook.application.use_cases.update_avatar import UpdateAvatarUseCase
from phonebook.application.use_cases.update_subscription import UpdateSubscriptionUseCase
from phonebook.domain.entities.user import User
from phonebook.domain.exceptions import AvatarInputError, DomainError


router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/current", response_model=MeResponse)
def get_current(
    current_user: User = Depends(get_current_user),
    use_case: GetMeUseCase = Depends(get_get_me_use_case),
):
    output = use_case.execute(user=current_user)
    return MeResponse(
        id=output.user_id,
        name=output.name,
        email=output.email,
        subscription=output.subscription,
        avatar_url=output.avatar_url,
        verified=output.email_verified,
    )


@router.patch("/subscription", response_model=SubscriptionResponse)
def update_subscription(
    req: SubscriptionRequest,
    current_user: User = Depends(get_current_user),
    use_case: UpdateSubscriptionUseCase = Depends(get_update_subscription_use_case),
):
    try:
        output = use_case.execute(UpdateSubscriptionInput(user_id=current_user.id, subscription=req.subscription))
    except DomainError as exc:
        raise_http(exc)
    return SubscriptionResponse(email=output.email, subscription=output.subscription)


@router.patch("/avatar", response_model=AvatarResponse)
def update_avatar(
    avatar: UploadFile = File(...),
    max_bytes: int = Depends(get_avatar_max_bytes),
    current_user: User = Depends(get_current_user),
    use_case: UpdateAvatarUseCase = Depends(get_update_avatar_use_case),
):
    try:
        # One byte past the limit is enough to reject the upload.
        content = avatar.file.read(max_bytes + 1)
        if len(content) > max_bytes:
            raise AvatarInputError(f"Avatar must be at most {max_bytes} bytes.")
        output = use_case.execute(
            UpdateAvatarInput(
                user_id=current_user.id,
                content=content,
                filename=avatar.filename or "",
            )
        )
    except DomainError as exc:
        raise_http(exc)
    finally:
        avatar.file.close()
    return AvatarResponse(avatar_url=output.avatar_url)


@router.patch("/reset-password", response_model=MessageResponse)
def change_password(
    req: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    try:
        use_case.execute(
            ChangePasswordInput(
                user_id=current_user.id,
                current_password=req.current_password,
                new_password=req.new_password,
                retype_new_password=req.retype_new_password,
            )
        )
    except DomainError as exc:
        raise_http(exc)
    return MessageResponse(message="Password changed successfully")

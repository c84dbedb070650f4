from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from phonebook.api.deps import (
    get_create_contact_use_case,
    get_current_user,
    get_get_contact_use_case,
    get_list_contacts_use_case,
    get_remove_contact_use_case,
    get_update_contact_use_case,
)
from phonebook.api.errors import raise_http
from phonebook.api.schemas.common import MessageResponse
from phonebook.api.schemas.contacts import (
    ContactCreateRequest,
    ContactResponse,
    ContactUpdateRequest,
    FavoriteRequest,
)
from phonebook.application.dto.contacts import (
    ContactOutput,
    ContactRefInput,
    CreateContactInput,
    ListContactsInput,
    UpdateContactInput,
)
from phonebook.application.use_cases.contacts import (
    CreateContactUseCase,
    GetContactUseCase,
    ListContactsUseCase,
    RemoveContactUseCase,
    UpdateContactUseCase,
)
from phonebook.domain.entities.user import User
from phonebook.domain.exceptions import DomainError


router = APIRouter(prefix="/api/contacts", tags=["contacts"])


def _contact_response(contact: ContactOutput) -> ContactResponse:
    return ContactResponse(
        id=contact.id,
        owner=contact.owner_id,
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        favorite=contact.favorite,
    )


@router.get("", response_model=list[ContactResponse])
def list_contacts(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    favorite: bool | None = None,
    current_user: User = Depends(get_current_user),
    use_case: ListContactsUseCase = Depends(get_list_contacts_use_case),
):
    try:
        rows = use_case.execute(
            ListContactsInput(owner_id=current_user.id, page=page, limit=limit, favorite=favorite)
        )
    except DomainError as exc:
        raise_http(exc)
    return [_contact_response(row) for row in rows]


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: UUID,
    current_user: User = Depends(get_current_user),
    use_case: GetContactUseCase = Depends(get_get_contact_use_case),
):
    try:
        output = use_case.execute(ContactRefInput(owner_id=current_user.id, contact_id=str(contact_id)))
    except DomainError as exc:
        raise_http(exc)
    return _contact_response(output)


@router.post("", response_model=ContactResponse, status_code=201)
def create_contact(
    req: ContactCreateRequest,
    current_user: User = Depends(get_current_user),
    use_case: CreateContactUseCase = Depends(get_create_contact_use_case),
):
    try:
        output = use_case.execute(
            CreateContactInput(
                owner_id=current_user.id,
                name=req.name,
                email=req.email,
                phone=req.phone,
                favorite=req.favorite,
            )
        )
    except DomainError as exc:
        raise_http(exc)
    return _contact_response(output)


@router.put("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: UUID,
    req: ContactUpdateRequest,
    current_user: User = Depends(get_current_user),
    use_case: UpdateContactUseCase = Depends(get_update_contact_use_case),
):
    try:
        output = use_case.execute(
            UpdateContactInput(
                owner_id=current_user.id,
                contact_id=str(contact_id),
                name=req.name,
                email=req.email,
                phone=req.phone,
                favorite=req.favorite,
            )
        )
    except DomainError as exc:
        raise_http(exc)
    return _contact_response(output)


@router.delete("/{contact_id}", response_model=MessageResponse)
def remove_contact(
    contact_id: UUID,
    current_user: User = Depends(get_current_user),
    use_case: RemoveContactUseCase = Depends(get_remove_contact_use_case),
):
    try:
        use_case.execute(ContactRefInput(owner_id=current_user.id, contact_id=str(contact_id)))
    except DomainError as exc:
        raise_http(exc)
    return MessageResponse(message="Contact deleted")


@router.patch("/{contact_id}/favorite", response_model=ContactResponse)
def update_favorite(
    contact_id: UUID,
    req: FavoriteRequest,
    current_user: User = Depends(get_current_user),
    use_case: UpdateContactUseCase = Depends(get_update_contact_use_case),
):
    try:
        output = use_case.execute(
            UpdateContactInput(owner_id=current_user.id, contact_id=str(contact_id), favorite=req.favorite)
        )
    except DomainError as exc:
        raise_http(exc)
    return _contact_response(output)

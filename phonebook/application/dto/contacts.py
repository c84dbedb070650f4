from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ListContactsInput:
    owner_id: str
    page: int = 1
    limit: int = 20
    favorite: bool | None = None


@dataclass(frozen=True)
class CreateContactInput:
    owner_id: str
    name: str
    email: str
    phone: str
    favorite: bool = False


@dataclass(frozen=True)
class UpdateContactInput:
    owner_id: str
    contact_id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    favorite: bool | None = None


@dataclass(frozen=True)
class ContactRefInput:
    owner_id: str
    contact_id: str


@dataclass(frozen=True)
class ContactOutput:
    id: str
    owner_id: str
    name: str
    email: str
    phone: str
    favorite: bool

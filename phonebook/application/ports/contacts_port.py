from __future__ import annotations

from datetime import datetime
from typing import Protocol

from phonebook.domain.entities.contact import Contact


class ContactsPort(Protocol):
    def list_contacts(
        self,
        *,
        owner_id: str,
        offset: int,
        limit: int,
        favorite: bool | None,
    ) -> list[Contact]:
        ...

    def get_contact(self, *, contact_id: str) -> Contact | None:
        ...

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
        ...

    def update_contact(self, *, contact_id: str, fields: dict[str, object], now: datetime) -> Contact | None:
        ...

    def delete_contact(self, *, contact_id: str) -> bool:
        ...

from __future__ import annotations

from uuid import uuid4

from phonebook.application.dto.contacts import (
    ContactOutput,
    ContactRefInput,
    CreateContactInput,
    ListContactsInput,
    UpdateContactInput,
)
from phonebook.application.ports.contacts_port import ContactsPort
from phonebook.domain.entities.contact import Contact
from phonebook.domain.exceptions import ContactAccessDeniedError, ContactInputError, ContactNotFoundError

from .auth_common import utcnow


MAX_PAGE_SIZE = 100


def build_contact_output(contact: Contact) -> ContactOutput:
    return ContactOutput(
        id=contact.id,
        owner_id=contact.owner_id,
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        favorite=contact.favorite,
    )


def _load_owned_contact(contacts_port: ContactsPort, *, owner_id: str, contact_id: str) -> Contact:
    contact = contacts_port.get_contact(contact_id=contact_id)
    if contact is None:
        raise ContactNotFoundError("Contact not found")
    if contact.owner_id != owner_id:
        raise ContactAccessDeniedError("Access denied")
    return contact


class ListContactsUseCase:
    def __init__(self, *, contacts_port: ContactsPort):
        self._contacts_port = contacts_port

    def execute(self, command: ListContactsInput) -> list[ContactOutput]:
        if command.page < 1:
            raise ContactInputError("page must be a positive integer.")
        if command.limit < 1 or command.limit > MAX_PAGE_SIZE:
            raise ContactInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}.")

        rows = self._contacts_port.list_contacts(
            owner_id=command.owner_id,
            offset=(command.page - 1) * command.limit,
            limit=command.limit,
            favorite=command.favorite,
        )
        return [build_contact_output(row) for row in rows]


class GetContactUseCase:
    def __init__(self, *, contacts_port: ContactsPort):
        self._contacts_port = contacts_port

    def execute(self, command: ContactRefInput) -> ContactOutput:
        contact = _load_owned_contact(
            self._contacts_port,
            owner_id=command.owner_id,
            contact_id=command.contact_id,
        )
        return build_contact_output(contact)


class CreateContactUseCase:
    def __init__(self, *, contacts_port: ContactsPort):
        self._contacts_port = contacts_port

    def execute(self, command: CreateContactInput) -> ContactOutput:
        name = command.name.strip()
        email = command.email.strip()
        phone = command.phone.strip()
        for field_name, value in (("name", name), ("email", email), ("phone", phone)):
            if not value:
                raise ContactInputError(f"Missing required {field_name} field")

        contact = self._contacts_port.create_contact(
            contact_id=str(uuid4()),
            owner_id=command.owner_id,
            name=name,
            email=email,
            phone=phone,
            favorite=command.favorite,
            now=utcnow(),
        )
        return build_contact_output(contact)


class UpdateContactUseCase:
    def __init__(self, *, contacts_port: ContactsPort):
        self._contacts_port = contacts_port

    def execute(self, command: UpdateContactInput) -> ContactOutput:
        fields: dict[str, object] = {}
        for field_name in ("name", "email", "phone"):
            value = getattr(command, field_name)
            if value is None:
                continue
            value = value.strip()
            if not value:
                raise ContactInputError(f"{field_name} must not be empty.")
            fields[field_name] = value
        if command.favorite is not None:
            fields["favorite"] = command.favorite
        if not fields:
            raise ContactInputError("Missing fields")

        _load_owned_contact(self._contacts_port, owner_id=command.owner_id, contact_id=command.contact_id)
        contact = self._contacts_port.update_contact(contact_id=command.contact_id, fields=fields, now=utcnow())
        if contact is None:
            raise ContactNotFoundError("Contact not found")
        return build_contact_output(contact)


class RemoveContactUseCase:
    def __init__(self, *, contacts_port: ContactsPort):
        self._contacts_port = contacts_port

    def execute(self, command: ContactRefInput) -> None:
        _load_owned_contact(self._contacts_port, owner_id=command.owner_id, contact_id=command.contact_id)
        if not self._contacts_port.delete_contact(contact_id=command.contact_id):
            raise ContactNotFoundError("Contact not found")

from __future__ import annotations

from typing import Any, Mapping

from phonebook.domain.entities.contact import Contact


def map_row_to_contact(row: Mapping[str, Any]) -> Contact:
    return Contact(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        favorite=bool(row["favorite"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

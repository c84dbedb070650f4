from __future__ import annotations

from datetime import datetime

from sqlalchemy import text

from phonebook.application.ports.contacts_port import ContactsPort
from phonebook.infrastructure.db.mappers.contacts_mapper import map_row_to_contact


CONTACT_COLUMNS = "id, owner_id, name, email, phone, favorite, created_at, updated_at"

UPDATABLE_FIELDS = ("name", "email", "phone", "favorite")


class SqlContactsRepository(ContactsPort):
    def __init__(self, engine):
        self._engine = engine

    def list_contacts(
        self,
        *,
        owner_id: str,
        offset: int,
        limit: int,
        favorite: bool | None,
    ):
        sql = f"""
            SELECT {CONTACT_COLUMNS}
            FROM public.contacts
            WHERE owner_id = :owner_id
              AND (CAST(:favorite AS boolean) IS NULL OR favorite = :favorite)
            ORDER BY created_at, id
            OFFSET :offset
            LIMIT :limit
        """
        params = {"owner_id": owner_id, "favorite": favorite, "offset": offset, "limit": limit}
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        return [map_row_to_contact(row) for row in rows]

    def get_contact(self, *, contact_id: str):
        sql = f"""
            SELECT {CONTACT_COLUMNS}
            FROM public.contacts
            WHERE id = :contact_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"contact_id": contact_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_contact(row)

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
    ):
        sql = f"""
            INSERT INTO public.contacts (
                id, owner_id, name, email, phone, favorite, created_at, updated_at
            ) VALUES (
                :id, :owner_id, :name, :email, :phone, :favorite, :now, :now
            )
            RETURNING {CONTACT_COLUMNS}
        """
        params = {
            "id": contact_id,
            "owner_id": owner_id,
            "name": name,
            "email": email,
            "phone": phone,
            "favorite": favorite,
            "now": now,
        }
        with self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().one()
        return map_row_to_contact(row)

    def update_contact(self, *, contact_id: str, fields: dict[str, object], now: datetime):
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported contact fields: {sorted(unknown)}.")

        assignments = [f"{name} = :{name}" for name in UPDATABLE_FIELDS if name in fields]
        assignments.append("updated_at = :now")
        sql = f"""
            UPDATE public.contacts
            SET {", ".join(assignments)}
            WHERE id = :contact_id
            RETURNING {CONTACT_COLUMNS}
        """
        params = {**fields, "contact_id": contact_id, "now": now}
        with self._engine.begin() as conn:
            row = conn.execute(text(sql), params).mappings().first()
        if row is None:
            return None
        return map_row_to_contact(row)

    def delete_contact(self, *, contact_id: str) -> bool:
        sql = """
            DELETE FROM public.contacts
            WHERE id = :contact_id
        """
        with self._engine.begin() as conn:
            result = conn.execute(text(sql), {"contact_id": contact_id})
        return result.rowcount > 0

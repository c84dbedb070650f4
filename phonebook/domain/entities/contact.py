from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Contact:
    id: str
    owner_id: str
    name: str
    email: str
    phone: str
    favorite: bool
    created_at: datetime
    updated_at: datetime

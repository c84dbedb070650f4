from __future__ import annotations

from pydantic import BaseModel


MIN_PASSWORD_LENGTH = 6


class MessageResponse(BaseModel):
    message: str

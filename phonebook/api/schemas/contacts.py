from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class ContactCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=40)
    favorite: bool = False


class ContactUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=1, max_length=40)
    favorite: bool | None = None


class FavoriteRequest(BaseModel):
    favorite: bool


class ContactResponse(BaseModel):
    id: str
    owner: str
    name: str
    email: str
    phone: str
    favorite: bool

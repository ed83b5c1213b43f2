from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from vaultsync.schemas.base import ClientModel


class RegisterIn(ClientModel):
    """Account creation. The master password never reaches the server, only its client-side hash."""

    email: EmailStr
    name: str = Field(default='', max_length=255)
    master_password_hash: str = Field(min_length=1, max_length=1024)
    master_password_hint: Optional[str] = Field(default=None, max_length=255)
    key: Optional[str] = None

    @field_validator('master_password_hash')
    @classmethod
    def validate_hash_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Master password hash cannot be empty')
        return v


class LoginIn(ClientModel):
    email: EmailStr
    master_password_hash: str = Field(min_length=1, max_length=1024)


class TokenOut(BaseModel):
    model_config = ConfigDict(extra='forbid')

    access_token: str
    token_type: str = 'Bearer'
    expires_in: int

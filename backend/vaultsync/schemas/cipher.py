from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field

from vaultsync.schemas.base import ClientModel
from vaultsync.schemas.folder import FolderData


class CipherData(ClientModel):
    """
    Cipher as submitted by a client.

    Only the payload matching ``type`` is used. Payloads stay untyped here so
    that a non-object payload reaches the merger and is reported as invalid
    data rather than a schema error.
    """
    # Not included by import requests
    folder_id: Optional[str] = None
    organization_id: Optional[str] = None

    # Login = 1, SecureNote = 2, Card = 3, Identity = 4. No coercion from
    # booleans or strings
    type: int = Field(strict=True)
    name: str
    notes: Optional[str] = None
    custom_fields: Optional[List[Any]] = Field(default=None, alias='fields')

    login: Optional[Any] = None
    secure_note: Optional[Any] = None
    card: Optional[Any] = None
    identity: Optional[Any] = None

    favorite: bool = False


class RelationsData(ClientModel):
    # Position of the cipher in ImportData.ciphers
    key: int = Field(ge=0)
    # Position of the folder in ImportData.folders
    value: int = Field(ge=0)


class ImportData(ClientModel):
    ciphers: List[CipherData] = []
    folders: List[FolderData] = []
    folder_relationships: List[RelationsData] = []


class SelectedCiphersData(ClientModel):
    ids: List[str]


class PasswordData(ClientModel):
    master_password_hash: str

from __future__ import annotations

from vaultsync.schemas.base import ClientModel


class FolderData(ClientModel):
    name: str

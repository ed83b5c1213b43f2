from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from vaultsync.crud import ciphers as crud_ciphers
from vaultsync.crud import folders as crud_folders
from vaultsync.models.user import User
from vaultsync.services.domains import get_eq_domains


def build_sync(db: Session, user: User, host: str) -> dict[str, Any]:
    """Everything a client needs to rebuild its local vault. Read only."""
    folders = crud_folders.list_by_user(db, user.uuid)
    ciphers = crud_ciphers.list_by_user(db, user.uuid)

    return {
        "Profile": user.to_json(),
        "Folders": [f.to_json() for f in folders],
        "Ciphers": [c.to_json(host) for c in ciphers],
        "Domains": get_eq_domains(user),
        "Object": "sync",
    }

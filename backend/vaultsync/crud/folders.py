from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from vaultsync.core.util import new_uuid
from vaultsync.crud.base import persist
from vaultsync.models.cipher import Cipher
from vaultsync.models.folder import Folder


def get_by_uuid(db: Session, uuid: str) -> Folder | None:
    return db.get(Folder, uuid)


def list_by_user(db: Session, user_uuid: str) -> list[Folder]:
    stmt = select(Folder).where(Folder.user_uuid == user_uuid)
    return list(db.execute(stmt).scalars().all())


def create_folder(db: Session, user_uuid: str, name: str, commit: bool = True) -> Folder:
    folder = Folder(uuid=new_uuid(), user_uuid=user_uuid, name=name)
    db.add(folder)
    persist(db, commit)
    return folder


def save(db: Session, folder: Folder, commit: bool = True) -> Folder:
    folder.updated_at = datetime.utcnow()
    db.add(folder)
    persist(db, commit)
    return folder


def delete(db: Session, folder: Folder, commit: bool = True) -> None:
    # Ciphers only reference folders, they lose the reference instead of going away
    db.execute(
        update(Cipher)
        .where(Cipher.folder_uuid == folder.uuid)
        .values(folder_uuid=None)
        .execution_options(synchronize_session="fetch")
    )
    db.delete(folder)
    persist(db, commit)

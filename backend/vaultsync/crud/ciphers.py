from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from vaultsync.crud.base import persist
from vaultsync.models.cipher import Cipher


def get_by_uuid(db: Session, uuid: str) -> Cipher | None:
    return db.get(Cipher, uuid)


def list_by_user(db: Session, user_uuid: str) -> list[Cipher]:
    stmt = (
        select(Cipher)
        .where(Cipher.user_uuid == user_uuid)
        .options(selectinload(Cipher.attachments))
    )
    return list(db.execute(stmt).scalars().all())


def save(db: Session, cipher: Cipher, commit: bool = True) -> Cipher:
    cipher.updated_at = datetime.utcnow()
    db.add(cipher)
    persist(db, commit)
    return cipher


def delete(db: Session, cipher: Cipher, commit: bool = True) -> None:
    """Delete the cipher row. Attachments must have been removed by the caller."""
    # Drop a stale collection so the ORM cascade does not revisit deleted rows
    db.expire(cipher, ["attachments"])
    db.delete(cipher)
    persist(db, commit)

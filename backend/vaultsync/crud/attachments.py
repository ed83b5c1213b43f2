from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from vaultsync.crud.base import persist
from vaultsync.models.attachment import Attachment


def get_by_id(db: Session, attachment_id: str) -> Attachment | None:
    return db.get(Attachment, attachment_id)


def list_by_cipher(db: Session, cipher_uuid: str) -> list[Attachment]:
    stmt = select(Attachment).where(Attachment.cipher_uuid == cipher_uuid)
    return list(db.execute(stmt).scalars().all())


def create_attachment(
    db: Session,
    attachment_id: str,
    cipher_uuid: str,
    file_name: str,
    file_size: int,
    commit: bool = True,
) -> Attachment:
    attachment = Attachment(
        id=attachment_id,
        cipher_uuid=cipher_uuid,
        file_name=file_name,
        file_size=file_size,
    )
    db.add(attachment)
    persist(db, commit)
    return attachment


def delete(db: Session, attachment: Attachment, commit: bool = True) -> None:
    db.delete(attachment)
    persist(db, commit)

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vaultsync.core.errors import InvalidInput, Unauthorized
from vaultsync.core.security import verify_password
from vaultsync.core.util import new_uuid
from vaultsync.crud import attachments as crud_attachments
from vaultsync.crud import ciphers as crud_ciphers
from vaultsync.crud import folders as crud_folders
from vaultsync.models.cipher import Cipher, CipherType
from vaultsync.models.user import User
from vaultsync.schemas.cipher import CipherData
from vaultsync.services.attachments import AttachmentStore
from vaultsync.services.normalize import normalize_keys
from vaultsync.services.ownership import get_owned_cipher, get_owned_folder

logger = logging.getLogger(__name__)


def build_cipher_data(data: CipherData) -> tuple[dict[str, Any], list[dict[str, Any]] | None]:
    """
    Build the canonical data document for ``data`` and its normalized custom
    fields. Raises InvalidInput without side effects.
    """
    # Name and Notes are kept in the document for older clients even though
    # they are also stored as columns
    values: dict[str, Any] = {
        "Name": data.name,
        "Notes": data.notes,
    }

    fields = None
    if data.custom_fields is not None:
        fields = []
        for field in data.custom_fields:
            normalized = normalize_keys(field)
            if normalized is None:
                raise InvalidInput("Field data invalid")
            fields.append(normalized)
    # Explicit null, not a missing key
    values["Fields"] = fields

    try:
        cipher_type = CipherType(data.type)
    except ValueError:
        raise InvalidInput("Invalid type") from None

    type_data = getattr(data, cipher_type.payload_attr)
    if type_data is None:
        raise InvalidInput("Data missing")

    normalized = normalize_keys(type_data)
    if normalized is None:
        raise InvalidInput("Data invalid")
    values.update(normalized)

    return values, fields


def update_cipher_from_data(db: Session, cipher: Cipher, data: CipherData, user_uuid: str) -> None:
    """
    Apply client data to ``cipher`` without persisting it.

    Everything is validated before the first attribute is touched, so a
    failure leaves the cipher exactly as it was.
    """
    if data.folder_id is not None:
        get_owned_folder(db, data.folder_id, user_uuid)

    values, fields = build_cipher_data(data)

    if data.folder_id is not None:
        cipher.folder_uuid = data.folder_id

    if data.organization_id is not None:
        # TODO: check the user is a member of the organization once organizations exist
        cipher.organization_uuid = data.organization_id

    cipher.type_ = data.type
    cipher.name = data.name
    cipher.notes = data.notes
    cipher.fields = json.dumps(fields) if fields is not None else None
    cipher.data = json.dumps(values)


def list_ciphers(db: Session, user_uuid: str) -> list[Cipher]:
    return crud_ciphers.list_by_user(db, user_uuid)


def create_cipher(db: Session, user_uuid: str, data: CipherData) -> Cipher:
    cipher = Cipher(uuid=new_uuid(), user_uuid=user_uuid, favorite=data.favorite)
    update_cipher_from_data(db, cipher, data, user_uuid)
    crud_ciphers.save(db, cipher)
    logger.info("Created cipher %s for user %s", cipher.uuid, user_uuid)
    return cipher


def update_cipher(db: Session, uuid: str, user_uuid: str, data: CipherData) -> Cipher:
    cipher = get_owned_cipher(db, uuid, user_uuid)
    update_cipher_from_data(db, cipher, data, user_uuid)
    cipher.favorite = data.favorite
    crud_ciphers.save(db, cipher)
    return cipher


def delete_cipher(db: Session, store: AttachmentStore, cipher: Cipher, atomic: bool = False) -> None:
    """
    Delete ``cipher`` and every attachment it owns, rows and blobs.

    By default each attachment is its own unit of work (row commit, then
    blob removal) and the cipher row goes last. With ``atomic`` all rows are
    removed in one transaction and blobs are only touched after it commits.
    """
    cipher_uuid = cipher.uuid
    attachments = crud_attachments.list_by_cipher(db, cipher_uuid)

    if not atomic:
        for attachment in attachments:
            store.delete(db, attachment)
        crud_ciphers.delete(db, cipher)
    else:
        blob_ids = [attachment.id for attachment in attachments]
        try:
            for attachment in attachments:
                crud_attachments.delete(db, attachment, commit=False)
            crud_ciphers.delete(db, cipher, commit=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        for file_id in blob_ids:
            store.blobs.delete(cipher_uuid, file_id)

    logger.info("Deleted cipher %s with %d attachment(s)", cipher_uuid, len(attachments))


def delete_owned_cipher(db: Session, store: AttachmentStore, uuid: str, user_uuid: str, atomic: bool = False) -> None:
    cipher = get_owned_cipher(db, uuid, user_uuid)
    delete_cipher(db, store, cipher, atomic=atomic)


def delete_selected(db: Session, store: AttachmentStore, ids: list[str], user_uuid: str, atomic: bool = False) -> None:
    # Resolve every id first so one foreign id deletes nothing
    ciphers = [get_owned_cipher(db, uuid, user_uuid) for uuid in dict.fromkeys(ids)]
    for cipher in ciphers:
        delete_cipher(db, store, cipher, atomic=atomic)


def purge_all(db: Session, store: AttachmentStore, user: User, master_password_hash: str, atomic: bool = False) -> None:
    """Delete every cipher, attachment and folder of ``user`` after re-checking the password."""
    if not verify_password(master_password_hash, user.password_hash):
        raise Unauthorized("Invalid password")

    for cipher in crud_ciphers.list_by_user(db, user.uuid):
        delete_cipher(db, store, cipher, atomic=atomic)

    folders = crud_folders.list_by_user(db, user.uuid)
    for folder in folders:
        crud_folders.delete(db, folder, commit=False)
    db.commit()

    logger.info("Purged vault of user %s", user.uuid)

from __future__ import annotations

from sqlalchemy.orm import Session

from vaultsync.core.errors import NotFound, NotOwned
from vaultsync.crud import ciphers as crud_ciphers
from vaultsync.crud import folders as crud_folders
from vaultsync.models.cipher import Cipher
from vaultsync.models.folder import Folder


def get_owned_cipher(db: Session, uuid: str, user_uuid: str) -> Cipher:
    cipher = crud_ciphers.get_by_uuid(db, uuid)
    if cipher is None:
        raise NotFound("Cipher doesn't exist")
    if cipher.user_uuid != user_uuid:
        raise NotOwned("Cipher doesn't exist")
    return cipher


def get_owned_folder(db: Session, uuid: str, user_uuid: str) -> Folder:
    folder = crud_folders.get_by_uuid(db, uuid)
    if folder is None:
        raise NotFound("Folder doesn't exist")
    if folder.user_uuid != user_uuid:
        raise NotOwned("Folder doesn't exist")
    return folder

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from vaultsync.core.errors import InvalidInput, VaultError
from vaultsync.core.util import new_uuid
from vaultsync.crud import ciphers as crud_ciphers
from vaultsync.crud import folders as crud_folders
from vaultsync.models.cipher import Cipher
from vaultsync.schemas.cipher import ImportData
from vaultsync.services.ciphers import update_cipher_from_data

logger = logging.getLogger(__name__)


def _folder_positions(data: ImportData) -> dict[int, int]:
    """Map cipher position -> folder position. A repeated cipher position keeps its last folder."""
    relations: dict[int, int] = {}
    for relation in data.folder_relationships:
        if relation.value >= len(data.folders):
            raise InvalidInput("Invalid folder relationship")
        relations[relation.key] = relation.value
    return relations


def import_vault(db: Session, user_uuid: str, data: ImportData, atomic: bool = False) -> None:
    """
    Bulk-create folders and then ciphers for ``user_uuid``.

    Import files reference folders by their position in ``data.folders``
    since the folders have no ids yet. Without ``atomic`` every folder and
    cipher is committed as it is created, so a failing cipher leaves the
    earlier ones in place; with ``atomic`` the whole import is rolled back.
    """
    relations = _folder_positions(data)
    commit = not atomic

    try:
        folders = [
            crud_folders.create_folder(db, user_uuid, folder.name, commit=commit)
            for folder in data.folders
        ]

        for index, cipher_data in enumerate(data.ciphers):
            cipher = Cipher(uuid=new_uuid(), user_uuid=user_uuid, favorite=cipher_data.favorite)
            try:
                update_cipher_from_data(db, cipher, cipher_data, user_uuid)
            except VaultError as e:
                logger.warning("Import for user %s stopped at cipher %d: %s", user_uuid, index, e.message)
                raise InvalidInput("Error creating cipher") from e

            folder_index = relations.get(index)
            cipher.folder_uuid = folders[folder_index].uuid if folder_index is not None else None

            crud_ciphers.save(db, cipher, commit=commit)

        if atomic:
            db.commit()
    except Exception:
        if atomic:
            db.rollback()
        raise

    logger.info(
        "Imported %d folder(s) and %d cipher(s) for user %s",
        len(data.folders),
        len(data.ciphers),
        user_uuid,
    )

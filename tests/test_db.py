"""Tests for vaultsync.db.session."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from conftest import login_data
from vaultsync.crud import folders as crud_folders
from vaultsync.models.cipher import Cipher
from vaultsync.schemas.cipher import CipherData
from vaultsync.services.ciphers import create_cipher


def test_sqlite_connections_enforce_foreign_keys(db):
    assert db.execute(text("PRAGMA foreign_keys")).scalar_one() == 1


def test_cipher_for_unknown_user_is_rejected(db):
    db.add(Cipher(user_uuid="no-such-user", type_=1, name="n", data="{}"))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_deleting_a_folder_row_nulls_cipher_reference_in_the_database(db, user):
    folder = crud_folders.create_folder(db, user.uuid, "2.enc-folder")
    cipher = create_cipher(db, user.uuid, CipherData.model_validate(login_data(folderId=folder.uuid)))

    # Bypass the repository so only the schema's ON DELETE SET NULL applies
    db.execute(text("DELETE FROM folders WHERE uuid = :uuid"), {"uuid": folder.uuid})
    db.commit()
    db.refresh(cipher)

    assert cipher.folder_uuid is None

"""Tests for vaultsync.services.imports."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from conftest import login_data
from vaultsync.core.errors import InvalidInput
from vaultsync.crud import ciphers as crud_ciphers
from vaultsync.crud import folders as crud_folders
from vaultsync.models.cipher import Cipher
from vaultsync.models.folder import Folder
from vaultsync.schemas.cipher import ImportData
from vaultsync.services.imports import import_vault


def _import(folders, ciphers, relationships):
    return ImportData.model_validate(
        {
            "folders": [{"name": name} for name in folders],
            "ciphers": ciphers,
            "folderRelationships": [{"key": k, "value": v} for k, v in relationships],
        }
    )


def _by_name(db, user):
    return {c.name: c for c in crud_ciphers.list_by_user(db, user.uuid)}


def _folder_ids(db, user):
    return {f.name: f.uuid for f in crud_folders.list_by_user(db, user.uuid)}


def _count(db, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_relationships_map_cipher_positions_to_folder_positions(db, user):
    data = _import(
        ["F0", "F1"],
        [login_data(name="C0"), login_data(name="C1"), login_data(name="C2")],
        [(0, 1), (2, 0)],
    )

    import_vault(db, user.uuid, data)

    folders = _folder_ids(db, user)
    ciphers = _by_name(db, user)
    assert ciphers["C0"].folder_uuid == folders["F1"]
    assert ciphers["C1"].folder_uuid is None
    assert ciphers["C2"].folder_uuid == folders["F0"]


def test_last_relationship_for_a_cipher_wins(db, user):
    data = _import(["F0", "F1"], [login_data(name="C0")], [(0, 0), (0, 1)])

    import_vault(db, user.uuid, data)

    assert _by_name(db, user)["C0"].folder_uuid == _folder_ids(db, user)["F1"]


def test_folders_without_ciphers_are_still_created(db, user):
    import_vault(db, user.uuid, _import(["A", "B", "C"], [], []))

    assert set(_folder_ids(db, user)) == {"A", "B", "C"}


def test_out_of_range_folder_position_writes_nothing(db, user):
    data = _import(["F0"], [login_data(name="C0")], [(0, 1)])

    with pytest.raises(InvalidInput, match="Invalid folder relationship"):
        import_vault(db, user.uuid, data)

    assert _count(db, Folder) == 0
    assert _count(db, Cipher) == 0


def test_failing_cipher_keeps_earlier_writes_by_default(db, user):
    data = _import(
        ["F0"],
        [login_data(name="C0"), login_data(name="C1", type=9), login_data(name="C2")],
        [(0, 0)],
    )

    with pytest.raises(InvalidInput, match="Error creating cipher"):
        import_vault(db, user.uuid, data)

    assert set(_folder_ids(db, user)) == {"F0"}
    assert set(_by_name(db, user)) == {"C0"}


def test_failing_cipher_rolls_back_everything_when_atomic(db, user):
    data = _import(
        ["F0", "F1"],
        [login_data(name="C0"), login_data(name="C1", login=None)],
        [(0, 0)],
    )

    with pytest.raises(InvalidInput, match="Error creating cipher"):
        import_vault(db, user.uuid, data, atomic=True)

    assert _count(db, Folder) == 0
    assert _count(db, Cipher) == 0


def test_atomic_import_commits_on_success(db, user):
    data = _import(["F0"], [login_data(name="C0"), login_data(name="C1")], [(1, 0)])

    import_vault(db, user.uuid, data, atomic=True)
    db.expire_all()

    ciphers = _by_name(db, user)
    assert ciphers["C0"].folder_uuid is None
    assert ciphers["C1"].folder_uuid == _folder_ids(db, user)["F0"]


def test_imported_ciphers_belong_to_importing_user(db, user, other_user):
    import_vault(db, user.uuid, _import([], [login_data(name="C0")], []))

    assert crud_ciphers.list_by_user(db, other_user.uuid) == []
    assert _by_name(db, user)["C0"].user_uuid == user.uuid

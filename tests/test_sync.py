"""Tests for vaultsync.services.sync, the domain settings and entity projections."""

from __future__ import annotations

from conftest import HOST, login_data, upload
from vaultsync.core.util import get_display_size
from vaultsync.crud import folders as crud_folders
from vaultsync.schemas.cipher import CipherData
from vaultsync.services.ciphers import create_cipher
from vaultsync.services.domains import GLOBAL_EQUIVALENT_DOMAINS, get_eq_domains, update_eq_domains
from vaultsync.services.sync import build_sync


def test_sync_composes_profile_folders_ciphers_and_domains(db, user, other_user, store):
    folders = [crud_folders.create_folder(db, user.uuid, name) for name in ("F0", "F1")]
    cipher = create_cipher(db, user.uuid, CipherData.model_validate(login_data(folderId=folders[1].uuid)))
    upload(store, db, cipher, [("a.txt", b"abc")])
    create_cipher(db, other_user.uuid, CipherData.model_validate(login_data()))

    snapshot = build_sync(db, user, HOST)

    assert snapshot["Object"] == "sync"
    assert snapshot["Profile"]["Id"] == user.uuid
    assert snapshot["Profile"]["Object"] == "profile"
    assert {f["Name"] for f in snapshot["Folders"]} == {"F0", "F1"}
    assert [c["Id"] for c in snapshot["Ciphers"]] == [cipher.uuid]
    assert snapshot["Domains"]["Object"] == "domains"

    (projected,) = snapshot["Ciphers"]
    assert projected["FolderId"] == folders[1].uuid
    (attachment,) = projected["Attachments"]
    assert attachment["Url"] == f"{HOST}/attachments/{cipher.uuid}/{attachment['Id']}"
    assert attachment["FileName"] == "a.txt"
    assert attachment["Size"] == "3"


def test_empty_vault_sync(db, user):
    snapshot = build_sync(db, user, HOST)

    assert snapshot["Folders"] == []
    assert snapshot["Ciphers"] == []


def test_cipher_projection_carries_type_key_and_legacy_uri(db, user):
    cipher = create_cipher(db, user.uuid, CipherData.model_validate(login_data()))

    projected = cipher.to_json(HOST)

    assert projected["Object"] == "cipher"
    assert projected["Type"] == 1
    assert projected["Login"] == projected["Data"]
    assert projected["Data"]["Username"] == "2.enc-user"
    assert projected["Data"]["Uri"] == "2.enc-uri"
    assert projected["Fields"] is None
    assert projected["RevisionDate"].endswith("Z")


def test_secure_note_projection(db, user):
    cipher = create_cipher(
        db,
        user.uuid,
        CipherData.model_validate({"type": 2, "name": "n", "secureNote": {"type": 0}}),
    )

    projected = cipher.to_json(HOST)

    assert projected["SecureNote"] == {"Name": "n", "Notes": None, "Fields": None, "Type": 0}
    assert "Login" not in projected


def test_domains_mark_excluded_globals(db, user):
    update_eq_domains(db, user, [["example.com", "example.net"]], [1])

    domains = get_eq_domains(user)

    assert domains["EquivalentDomains"] == [["example.com", "example.net"]]
    excluded = {g["Type"] for g in domains["GlobalEquivalentDomains"] if g["Excluded"]}
    assert excluded == {1}
    assert len(domains["GlobalEquivalentDomains"]) == len(GLOBAL_EQUIVALENT_DOMAINS)


def test_display_size():
    assert get_display_size(0) == "0 bytes"
    assert get_display_size(1024) == "1024 bytes"
    assert get_display_size(1536) == "1.5 KB"
    assert get_display_size(5 * 1024 * 1024) == "5 MB"

"""Shared test fixtures for vaultsync."""

from __future__ import annotations

import itertools
import os
from pathlib import Path
from typing import Any, Iterable

# Settings are read at import time; keep the module-level engine off disk
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vaultsync import models  # noqa: F401
from vaultsync.core.security import hash_password
from vaultsync.core.util import new_uuid
from vaultsync.db.base import Base
from vaultsync.db.session import make_engine
from vaultsync.models.user import User
from vaultsync.services.attachments import AttachmentStore
from vaultsync.services.blobs import FileSystemBlobStore

HOST = "https://vault.example.test"
MASTER_PASSWORD_HASH = "client-derived-master-password-hash"
BOUNDARY = "----vaultsync-test-boundary"

# argon2 is deliberately slow, hash once for every test user
_PASSWORD_HASH = hash_password(MASTER_PASSWORD_HASH)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_user(db: Session, email: str) -> User:
    user = User(
        uuid=new_uuid(),
        email=email,
        name=email.split("@")[0],
        password_hash=_PASSWORD_HASH,
        security_stamp=new_uuid(),
    )
    db.add(user)
    db.commit()
    return user


def login_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": 1,
        "name": "2.enc-name",
        "notes": "2.enc-notes",
        "favorite": False,
        "login": {
            "username": "2.enc-user",
            "password": "2.enc-pass",
            "uris": [{"uri": "2.enc-uri", "match": None}],
            "totp": None,
        },
    }
    data.update(overrides)
    return data


def multipart_body(
    files: Iterable[tuple[str, bytes]],
    fields: Iterable[tuple[str, str]] = (),
    boundary: str = BOUNDARY,
) -> bytes:
    body = bytearray()
    for name, value in fields:
        body += (
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
            f"{value}\r\n"
        ).encode()
    for file_name, content in files:
        body += (
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="data"; filename="{file_name}"\r\n'
            "Content-Type: application/octet-stream\r\n\r\n"
        ).encode()
        body += content + b"\r\n"
    body += f"--{boundary}--\r\n".encode()
    return bytes(body)


def upload(store: AttachmentStore, db: Session, cipher, files, chunk_size: int = 0):
    session = store.begin_upload(db, cipher, BOUNDARY.encode())
    body = multipart_body(files)
    if chunk_size:
        for start in range(0, len(body), chunk_size):
            session.write(body[start:start + chunk_size])
    else:
        session.write(body)
    return session.finish()


class FlakyBlobStore(FileSystemBlobStore):
    """Blob store whose n-th ``open`` calls fail, counting from zero."""

    def __init__(self, root: Path, fail_on: Iterable[int] = (0,)):
        super().__init__(root)
        self.fail_on = set(fail_on)
        self.calls = 0

    def open(self, cipher_uuid: str, file_id: str):
        call = self.calls
        self.calls += 1
        if call in self.fail_on:
            raise OSError("No space left on device")
        return super().open(cipher_uuid, file_id)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db() -> Session:
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def user(db: Session) -> User:
    return make_user(db, "alice@example.com")


@pytest.fixture
def other_user(db: Session) -> User:
    return make_user(db, "bob@example.com")


@pytest.fixture
def counter_random():
    """Deterministic stand-in for os.urandom: 1, 2, 3... big-endian."""
    counter = itertools.count(1)
    return lambda n: next(counter).to_bytes(n, "big")


@pytest.fixture
def blobs(tmp_path: Path) -> FileSystemBlobStore:
    return FileSystemBlobStore(tmp_path / "attachments")


@pytest.fixture
def store(blobs: FileSystemBlobStore, counter_random) -> AttachmentStore:
    return AttachmentStore(blobs, random_bytes=counter_random)


@pytest.fixture
def client(db: Session, user: User, store: AttachmentStore):
    """TestClient authenticated as ``user``."""
    from fastapi.testclient import TestClient

    from vaultsync.core.security import Headers, get_headers
    from vaultsync.db.session import get_db
    from vaultsync.main import app
    from vaultsync.services.attachments import get_attachment_store

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_headers] = lambda: Headers(user=user, host=HOST)
    app.dependency_overrides[get_attachment_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

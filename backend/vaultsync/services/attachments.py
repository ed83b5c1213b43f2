from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, MultipartState, parse_options_header
from sqlalchemy.orm import Session

from vaultsync.core.config import settings
from vaultsync.core.errors import InvalidInput, NotFound, NotOwned
from vaultsync.crud import attachments as crud_attachments
from vaultsync.models.attachment import Attachment
from vaultsync.models.cipher import Cipher
from vaultsync.services.blobs import FileSystemBlobStore
from vaultsync.services.ownership import get_owned_cipher

logger = logging.getLogger(__name__)

FILE_ID_BYTES = 10


class UploadPolicy(str, enum.Enum):
    # Parts stand alone: a part that fails to save is skipped, the others are kept
    BEST_EFFORT = "best_effort"
    # Rows are created only when every part saved, otherwise nothing is kept
    ALL_OR_NOTHING = "all_or_nothing"


@dataclass
class PartOutcome:
    file_name: str
    file_id: str
    size: int = 0
    error: str | None = None

    @property
    def saved(self) -> bool:
        return self.error is None


def boundary_from_content_type(content_type: str | None) -> bytes:
    ctype, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if ctype.lower() != b"multipart/form-data" or not boundary:
        raise InvalidInput("Missing multipart boundary")
    return boundary


class UploadSession:
    """
    Streams one multipart/form-data body into the blob store.

    Feed body chunks to ``write`` as they arrive, then call ``finish``. Each
    file part is written straight to its own blob and gets one
    ``PartOutcome``; plain form fields are ignored.
    """

    def __init__(self, store: AttachmentStore, db: Session, cipher: Cipher, boundary: bytes):
        self._store = store
        self._db = db
        self._cipher_uuid = cipher.uuid

        self.outcomes: list[PartOutcome] = []

        self._headers: dict[str, str] = {}
        self._header_field = bytearray()
        self._header_value = bytearray()
        self._part: PartOutcome | None = None
        self._handle: BinaryIO | None = None

        self._parser = MultipartParser(
            boundary,
            callbacks={
                "on_part_begin": self._on_part_begin,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
            },
        )

    def write(self, chunk: bytes) -> None:
        try:
            self._parser.write(chunk)
        except MultipartParseError as e:
            self._abandon_open_part("invalid multipart data")
            self._discard_staged()
            raise InvalidInput("Invalid multipart data") from e

    def finish(self) -> list[PartOutcome]:
        self._parser.finalize()

        if self._parser.state != MultipartState.END:
            self._abandon_open_part("body ended inside the part")
            self._discard_staged()
            raise InvalidInput("Invalid multipart data")

        if self._store.policy is UploadPolicy.ALL_OR_NOTHING:
            if any(not part.saved for part in self.outcomes):
                self._discard_staged()
                raise InvalidInput("Attachment upload failed")
            for part in self.outcomes:
                self._create_row(part, commit=False)
            self._db.commit()

        return self.outcomes

    # Parser callbacks

    def _on_part_begin(self) -> None:
        self._headers = {}
        self._part = None
        self._handle = None

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        name = bytes(self._header_field).decode("latin-1").lower()
        self._headers[name] = bytes(self._header_value).decode("latin-1")
        self._header_field.clear()
        self._header_value.clear()

    def _on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get("content-disposition"))
        file_name = options.get(b"filename")
        if file_name is None:
            return

        part = PartOutcome(
            file_name=file_name.decode("utf-8", "replace"),
            file_id=self._store.new_file_id(),
        )
        self.outcomes.append(part)
        self._part = part

        try:
            self._handle = self._store.blobs.open(self._cipher_uuid, part.file_id)
        except OSError as e:
            self._fail_part(str(e))

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._handle is None:
            return
        try:
            self._handle.write(data[start:end])
        except OSError as e:
            self._fail_part(str(e))
            return
        self._part.size += end - start

    def _on_part_end(self) -> None:
        if self._handle is None:
            return

        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError as e:
            self._fail_part(str(e))
            return

        if self._store.policy is UploadPolicy.BEST_EFFORT:
            self._create_row(self._part, commit=True)
        self._part = None

    # Helpers

    def _create_row(self, part: PartOutcome, commit: bool) -> Attachment:
        attachment = crud_attachments.create_attachment(
            self._db,
            attachment_id=part.file_id,
            cipher_uuid=self._cipher_uuid,
            file_name=part.file_name,
            file_size=part.size,
            commit=commit,
        )
        logger.info("Stored attachment %s on cipher %s (%d bytes)", part.file_id, self._cipher_uuid, part.size)
        return attachment

    def _fail_part(self, reason: str) -> None:
        part = self._part
        part.error = reason
        logger.warning("Skipping attachment part of cipher %s: %s", self._cipher_uuid, reason)

        if self._handle is not None:
            handle, self._handle = self._handle, None
            try:
                handle.close()
            except OSError:
                logger.exception("Could not close partial blob %s", part.file_id)

        self._remove_blob(part.file_id)

    def _abandon_open_part(self, reason: str) -> None:
        if self._handle is not None:
            self._fail_part(reason)

    def _discard_staged(self) -> None:
        if self._store.policy is not UploadPolicy.ALL_OR_NOTHING:
            return
        for part in self.outcomes:
            if part.saved:
                self._remove_blob(part.file_id)

    def _remove_blob(self, file_id: str) -> None:
        try:
            self._store.blobs.delete(self._cipher_uuid, file_id)
        except OSError:
            logger.exception("Could not remove blob %s/%s", self._cipher_uuid, file_id)


class AttachmentStore:
    """
    Keeps attachment blobs and attachment rows in step.

    A row is only written after its blob saved; deleting checks the cipher
    is the caller's, removes the row and then the blob, tolerating a blob
    that is already gone.
    """

    def __init__(
        self,
        blobs: FileSystemBlobStore,
        random_bytes: Callable[[int], bytes] = os.urandom,
        policy: UploadPolicy = UploadPolicy.BEST_EFFORT,
    ):
        self.blobs = blobs
        self.policy = policy
        self._random_bytes = random_bytes

    def new_file_id(self) -> str:
        # Not checked for collisions, 80 random bits per cipher directory
        return self._random_bytes(FILE_ID_BYTES).hex()

    def begin_upload(self, db: Session, cipher: Cipher, boundary: bytes) -> UploadSession:
        return UploadSession(self, db, cipher, boundary)

    def blob_path(self, attachment: Attachment) -> Path:
        return self.blobs.path(attachment.cipher_uuid, attachment.id)

    def delete(self, db: Session, attachment: Attachment) -> None:
        cipher_uuid, file_id = attachment.cipher_uuid, attachment.id
        crud_attachments.delete(db, attachment)
        self.blobs.delete(cipher_uuid, file_id)

    def delete_owned(self, db: Session, cipher_uuid: str, attachment_id: str, user_uuid: str) -> None:
        # Cipher first: attachment lookups must not answer for other users' ciphers
        get_owned_cipher(db, cipher_uuid, user_uuid)

        attachment = crud_attachments.get_by_id(db, attachment_id)
        if attachment is None:
            raise NotFound("Attachment doesn't exist")
        if attachment.cipher_uuid != cipher_uuid:
            raise NotOwned("Attachment doesn't exist")

        self.delete(db, attachment)
        logger.info("Deleted attachment %s from cipher %s", attachment_id, cipher_uuid)


def get_attachment_store() -> AttachmentStore:
    return AttachmentStore(
        FileSystemBlobStore(settings.attachments_folder),
        policy=UploadPolicy(settings.upload_policy),
    )

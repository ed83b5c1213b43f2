from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class FileSystemBlobStore:
    """
    Attachment bytes on disk, one directory per cipher:
    ``<root>/<cipher_uuid>/<file_id>``.

    Both path components are server generated. Writes commit as soon as the
    handle is closed and are never size limited here.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path(self, cipher_uuid: str, file_id: str) -> Path:
        return self.root / cipher_uuid / file_id

    def open(self, cipher_uuid: str, file_id: str) -> BinaryIO:
        path = self.path(cipher_uuid, file_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        return open(path, "wb")

    def delete(self, cipher_uuid: str, file_id: str) -> bool:
        """Remove a blob. A blob that is already gone is not an error."""
        path = self.path(cipher_uuid, file_id)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("Blob %s/%s already missing", cipher_uuid, file_id)
            return False
        return True

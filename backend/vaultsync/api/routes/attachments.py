from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from vaultsync.core.errors import NotFound
from vaultsync.crud import attachments as crud_attachments
from vaultsync.db.session import get_db
from vaultsync.services.attachments import AttachmentStore, get_attachment_store

router = APIRouter(prefix='/attachments', tags=['attachments'])


@router.get('/{cipher_uuid}/{attachment_id}')
def download_attachment(
    cipher_uuid: str,
    attachment_id: str,
    db: Session = Depends(get_db),
    store: AttachmentStore = Depends(get_attachment_store),
):
    """
    Serve an attachment blob. The random storage name is the capability;
    the row must exist and belong to the cipher in the path.
    """
    attachment = crud_attachments.get_by_id(db, attachment_id)
    if attachment is None or attachment.cipher_uuid != cipher_uuid:
        raise NotFound("Attachment doesn't exist")

    path = store.blob_path(attachment)
    if not path.is_file():
        raise NotFound("Attachment doesn't exist")

    return FileResponse(
        path,
        media_type='application/octet-stream',
        filename=attachment.file_name,
    )

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from vaultsync.core.config import settings
from vaultsync.core.security import Headers, get_headers
from vaultsync.core.util import list_response
from vaultsync.db.session import get_db
from vaultsync.schemas.cipher import CipherData, ImportData, PasswordData, SelectedCiphersData
from vaultsync.services import ciphers as cipher_service
from vaultsync.services.attachments import AttachmentStore, boundary_from_content_type, get_attachment_store
from vaultsync.services.imports import import_vault
from vaultsync.services.ownership import get_owned_cipher


router = APIRouter(prefix='/api/ciphers', tags=['ciphers'])


@router.get('')
def get_ciphers(
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    ciphers = cipher_service.list_ciphers(db, headers.user.uuid)
    return list_response(c.to_json(headers.host) for c in ciphers)


@router.post('')
def post_ciphers(
    data: CipherData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    cipher = cipher_service.create_cipher(db, headers.user.uuid, data)
    return cipher.to_json(headers.host)


# The fixed paths below must be registered before '/{uuid}'

@router.post('/import')
def post_ciphers_import(
    data: ImportData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    import_vault(db, headers.user.uuid, data, atomic=settings.atomic_import)


@router.post('/delete')
def delete_cipher_selected(
    data: SelectedCiphersData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
    store: AttachmentStore = Depends(get_attachment_store),
):
    cipher_service.delete_selected(db, store, data.ids, headers.user.uuid, atomic=settings.atomic_cascade_delete)


@router.post('/purge')
def delete_all(
    data: PasswordData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
    store: AttachmentStore = Depends(get_attachment_store),
):
    cipher_service.purge_all(
        db,
        store,
        headers.user,
        data.master_password_hash,
        atomic=settings.atomic_cascade_delete,
    )


@router.get('/{uuid}')
def get_cipher(
    uuid: str,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    cipher = get_owned_cipher(db, uuid, headers.user.uuid)
    return cipher.to_json(headers.host)


@router.post('/{uuid}')
@router.put('/{uuid}')
def put_cipher(
    uuid: str,
    data: CipherData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    cipher = cipher_service.update_cipher(db, uuid, headers.user.uuid, data)
    return cipher.to_json(headers.host)


@router.post('/{uuid}/attachment')
async def post_attachment(
    uuid: str,
    request: Request,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
    store: AttachmentStore = Depends(get_attachment_store),
):
    """
    Upload one or more files to a cipher.

    The body is streamed part by part into the blob store. Under the default
    best-effort policy a file that fails to save is skipped and the request
    still succeeds as long as the body itself is well formed.
    """
    cipher = await run_in_threadpool(get_owned_cipher, db, uuid, headers.user.uuid)
    boundary = boundary_from_content_type(request.headers.get('content-type'))

    # Blob writes and row commits block, keep them off the event loop
    upload = store.begin_upload(db, cipher, boundary)
    async for chunk in request.stream():
        await run_in_threadpool(upload.write, chunk)
    await run_in_threadpool(upload.finish)

    await run_in_threadpool(db.refresh, cipher)
    return await run_in_threadpool(cipher.to_json, headers.host)


@router.post('/{uuid}/attachment/{attachment_id}/delete')
@router.delete('/{uuid}/attachment/{attachment_id}')
def delete_attachment(
    uuid: str,
    attachment_id: str,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
    store: AttachmentStore = Depends(get_attachment_store),
):
    store.delete_owned(db, uuid, attachment_id, headers.user.uuid)


@router.post('/{uuid}/delete')
@router.delete('/{uuid}')
def delete_cipher(
    uuid: str,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
    store: AttachmentStore = Depends(get_attachment_store),
):
    cipher_service.delete_owned_cipher(db, store, uuid, headers.user.uuid, atomic=settings.atomic_cascade_delete)

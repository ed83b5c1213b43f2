from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vaultsync.core.security import Headers, get_headers
from vaultsync.core.util import list_response
from vaultsync.crud import folders as crud_folders
from vaultsync.db.session import get_db
from vaultsync.schemas.folder import FolderData
from vaultsync.services.ownership import get_owned_folder

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api/folders', tags=['folders'])


@router.get('')
def get_folders(
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    folders = crud_folders.list_by_user(db, headers.user.uuid)
    return list_response(f.to_json() for f in folders)


@router.get('/{uuid}')
def get_folder(
    uuid: str,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    return get_owned_folder(db, uuid, headers.user.uuid).to_json()


@router.post('')
def post_folders(
    data: FolderData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    folder = crud_folders.create_folder(db, headers.user.uuid, data.name)
    logger.info("Created folder %s for user %s", folder.uuid, headers.user.uuid)
    return folder.to_json()


@router.post('/{uuid}')
@router.put('/{uuid}')
def put_folder(
    uuid: str,
    data: FolderData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    folder = get_owned_folder(db, uuid, headers.user.uuid)
    folder.name = data.name
    crud_folders.save(db, folder)
    return folder.to_json()


@router.post('/{uuid}/delete')
@router.delete('/{uuid}')
def delete_folder(
    uuid: str,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    folder = get_owned_folder(db, uuid, headers.user.uuid)
    crud_folders.delete(db, folder)
    logger.info("Deleted folder %s", uuid)

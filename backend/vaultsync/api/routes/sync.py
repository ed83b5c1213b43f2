from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vaultsync.core.security import Headers, get_headers
from vaultsync.db.session import get_db
from vaultsync.schemas.settings import EquivalentDomainsData
from vaultsync.services.domains import get_eq_domains, update_eq_domains
from vaultsync.services.sync import build_sync

router = APIRouter(prefix='/api', tags=['sync'])


@router.get('/sync')
def sync(
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    return build_sync(db, headers.user, headers.host)


@router.get('/settings/domains')
def get_domains(headers: Headers = Depends(get_headers)):
    return get_eq_domains(headers.user)


@router.post('/settings/domains')
def post_domains(
    data: EquivalentDomainsData,
    db: Session = Depends(get_db),
    headers: Headers = Depends(get_headers),
):
    return update_eq_domains(
        db,
        headers.user,
        data.equivalent_domains,
        data.excluded_global_equivalent_domains,
    )

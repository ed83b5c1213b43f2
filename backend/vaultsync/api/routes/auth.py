# backend/vaultsync/api/routes/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from vaultsync.core.config import settings
from vaultsync.core.security import create_access_token, verify_password
from vaultsync.crud.users import create_user, get_by_email as get_user_by_email
from vaultsync.db.session import get_db
from vaultsync.schemas.auth import LoginIn, RegisterIn, TokenOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    # Don't reveal whether the address is taken
    if get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="Invalid credentials")

    u = create_user(
        db,
        email=payload.email,
        master_password_hash=payload.master_password_hash,
        name=payload.name,
        password_hint=payload.master_password_hint,
        key=payload.key,
    )
    logger.info("Registered user %s", u.uuid)
    return {"Id": u.uuid, "Email": u.email, "Name": u.name}


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    u = get_user_by_email(db, payload.email)
    if not u or not verify_password(payload.master_password_hash, u.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token(subject=u.uuid, extra={"sstamp": u.security_stamp})
    return TokenOut(access_token=access_token, expires_in=settings.JWT_EXPIRE_MINUTES * 60)

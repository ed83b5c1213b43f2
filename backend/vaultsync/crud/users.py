from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from vaultsync.core.security import hash_password
from vaultsync.core.util import new_uuid
from vaultsync.models.user import User


def get_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == email.lower())
    return db.execute(stmt).scalar_one_or_none()


def create_user(
    db: Session,
    email: str,
    master_password_hash: str,
    name: str = "",
    password_hint: str | None = None,
    key: str | None = None,
) -> User:
    u = User(
        uuid=new_uuid(),
        email=email.lower(),
        name=name,
        password_hash=hash_password(master_password_hash),
        password_hint=password_hint,
        key=key,
        security_stamp=new_uuid(),
    )

    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def update_equivalent_domains(
    db: Session,
    user: User,
    equivalent_domains: list[list[str]],
    excluded_globals: list[int],
) -> User:
    user.equivalent_domains = json.dumps(equivalent_domains)
    user.excluded_globals = json.dumps(excluded_globals)
    user.updated_at = datetime.utcnow()

    db.add(user)
    db.commit()
    db.refresh(user)
    return user

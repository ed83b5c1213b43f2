from __future__ import annotations

from sqlalchemy.orm import Session


def persist(db: Session, commit: bool) -> None:
    """Commit, or only flush when the caller owns the transaction."""
    if commit:
        db.commit()
    else:
        db.flush()

# backend/vaultsync/models/folder.py
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from vaultsync.core.util import format_date, new_uuid
from vaultsync.db.base import Base


class Folder(Base):
    __tablename__ = "folders"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    user_uuid: Mapped[str] = mapped_column(ForeignKey("users.uuid", ondelete="CASCADE"), index=True, nullable=False)

    # Encrypted by the client
    name: Mapped[str] = mapped_column(String(1024), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    def to_json(self) -> dict[str, Any]:
        return {
            "Id": self.uuid,
            "RevisionDate": format_date(self.updated_at),
            "Name": self.name,
            "Object": "folder",
        }

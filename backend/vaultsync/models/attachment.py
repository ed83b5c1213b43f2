# backend/vaultsync/models/attachment.py
from typing import Any

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vaultsync.core.util import get_display_size
from vaultsync.db.base import Base


class Attachment(Base):
    __tablename__ = "attachments"

    # Random storage name, also the blob's file name inside the cipher directory
    id: Mapped[str] = mapped_column(String(40), primary_key=True)

    cipher_uuid: Mapped[str] = mapped_column(ForeignKey("ciphers.uuid", ondelete="CASCADE"), index=True, nullable=False)

    # Provided by the client, don't trust it and never build paths from it
    file_name: Mapped[str] = mapped_column(String(1024), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)

    cipher = relationship("Cipher", back_populates="attachments")

    def to_json(self, host: str) -> dict[str, Any]:
        return {
            "Id": self.id,
            "Url": f"{host}/attachments/{self.cipher_uuid}/{self.id}",
            "FileName": self.file_name,
            "Size": str(self.file_size),
            "SizeName": get_display_size(self.file_size),
            "Object": "attachment",
        }

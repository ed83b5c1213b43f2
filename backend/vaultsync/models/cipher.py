# backend/vaultsync/models/cipher.py
import enum
import json
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vaultsync.core.util import format_date, new_uuid
from vaultsync.db.base import Base


class CipherType(enum.IntEnum):
    LOGIN = 1
    SECURE_NOTE = 2
    CARD = 3
    IDENTITY = 4

    @property
    def payload_attr(self) -> str:
        """Attribute of the request model carrying this type's payload."""
        return _PAYLOAD_ATTRS[self]

    @property
    def json_key(self) -> str:
        return _JSON_KEYS[self]


_PAYLOAD_ATTRS = {
    CipherType.LOGIN: "login",
    CipherType.SECURE_NOTE: "secure_note",
    CipherType.CARD: "card",
    CipherType.IDENTITY: "identity",
}

_JSON_KEYS = {
    CipherType.LOGIN: "Login",
    CipherType.SECURE_NOTE: "SecureNote",
    CipherType.CARD: "Card",
    CipherType.IDENTITY: "Identity",
}


class Cipher(Base):
    __tablename__ = "ciphers"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    user_uuid: Mapped[str] = mapped_column(ForeignKey("users.uuid", ondelete="CASCADE"), index=True, nullable=False)
    folder_uuid: Mapped[str | None] = mapped_column(ForeignKey("folders.uuid", ondelete="SET NULL"), index=True, nullable=True)

    # Passed through as sent by the client, membership is not checked
    organization_uuid: Mapped[str | None] = mapped_column(String(36), nullable=True)

    type_: Mapped[int] = mapped_column("type", Integer, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # JSON documents, canonical casing
    fields: Mapped[str | None] = mapped_column(Text, nullable=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)

    favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    attachments = relationship(
        "Attachment",
        back_populates="cipher",
        cascade="all,delete-orphan",
        order_by="Attachment.id",
    )

    def to_json(self, host: str) -> dict[str, Any]:
        data = json.loads(self.data)

        # Older clients read the first login URI from a top-level Uri key
        uris = data.get("Uris")
        if self.type_ == CipherType.LOGIN and isinstance(uris, list) and uris and isinstance(uris[0], dict):
            data["Uri"] = uris[0].get("uri", uris[0].get("Uri"))

        json_object = {
            "Id": self.uuid,
            "Type": self.type_,
            "RevisionDate": format_date(self.updated_at),
            "FolderId": self.folder_uuid,
            "Favorite": self.favorite,
            "OrganizationId": self.organization_uuid,
            "Attachments": [a.to_json(host) for a in self.attachments],
            "OrganizationUseTotp": False,
            "Name": self.name,
            "Notes": self.notes,
            "Fields": json.loads(self.fields) if self.fields else None,
            "Data": data,
            "Object": "cipher",
            "Edit": True,
        }
        json_object[CipherType(self.type_).json_key] = data
        return json_object

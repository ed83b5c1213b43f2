# backend/vaultsync/models/user.py
import json
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vaultsync.core.util import new_uuid
from vaultsync.db.base import Base


class User(Base):
    __tablename__ = "users"

    uuid: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # argon2 hash of the master password hash sent by the client
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hint: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Client-encrypted key material, opaque to the server
    key: Mapped[str | None] = mapped_column(Text, nullable=True)
    private_key: Mapped[str | None] = mapped_column(Text, nullable=True)
    public_key: Mapped[str | None] = mapped_column(Text, nullable=True)

    security_stamp: Mapped[str] = mapped_column(String(36), nullable=False, default=new_uuid)

    # JSON: list of lists of domains / list of global group types
    equivalent_domains: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    excluded_globals: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    def get_equivalent_domains(self) -> list[list[str]]:
        return json.loads(self.equivalent_domains or "[]")

    def get_excluded_globals(self) -> list[int]:
        return json.loads(self.excluded_globals or "[]")

    def to_json(self) -> dict[str, Any]:
        return {
            "Id": self.uuid,
            "Name": self.name,
            "Email": self.email,
            "EmailVerified": True,
            "Premium": True,
            "MasterPasswordHint": self.password_hint,
            "Culture": "en-US",
            "TwoFactorEnabled": False,
            "Key": self.key,
            "PrivateKey": self.private_key,
            "SecurityStamp": self.security_stamp,
            "Organizations": [],
            "Object": "profile",
        }

# backend/vaultsync/models/__init__.py
from .user import User
from .folder import Folder
from .cipher import Cipher, CipherType
from .attachment import Attachment

__all__ = ["User", "Folder", "Cipher", "CipherType", "Attachment"]

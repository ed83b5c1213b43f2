"""
Domain errors raised by the vault services.

Routes never build error responses themselves: every ``VaultError`` is
rendered by the exception handler registered in ``vaultsync.main``.
"""
from __future__ import annotations

from typing import Any


class VaultError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(VaultError):
    status_code = 404


class NotOwned(NotFound):
    """
    The entity exists but belongs to someone else.

    Always raised with the same message as the matching ``NotFound`` so a
    caller cannot discover other users' ids.
    """


class InvalidInput(VaultError):
    status_code = 400


class Unauthorized(VaultError):
    status_code = 401


def error_body(message: str, validation_errors: dict[str, list[str]] | None = None) -> dict[str, Any]:
    return {
        "Message": message,
        "ValidationErrors": validation_errors,
        "Object": "error",
    }

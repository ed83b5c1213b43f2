from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Iterable

_SIZE_UNITS = ["bytes", "KB", "MB", "GB", "TB", "PB"]


def new_uuid() -> str:
    return str(uuid.uuid4())


def format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def get_display_size(size: int) -> str:
    """Human readable size, e.g. 1536 -> '1.5 KB'."""
    value = float(size)
    unit = 0
    while value > 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


def list_response(items: Iterable[Any]) -> dict[str, Any]:
    return {"Data": list(items), "Object": "list"}

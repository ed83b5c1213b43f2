from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def upcase_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def normalize_keys(value: Any) -> dict[str, Any] | None:
    """
    Copy a client object into canonical casing: first letter of every key
    upper-cased, values untouched (nested objects keep the client's casing).

    Returns None when ``value`` is not an object, so callers can tell
    "not an object" apart from an empty one.
    """
    if not isinstance(value, Mapping):
        return None
    return {upcase_first(str(key)): val for key, val in value.items()}

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def _lower_first(key: str) -> str:
    return key[:1].lower() + key[1:]


class ClientModel(BaseModel):
    """
    Base for request bodies sent by vault clients.

    Current clients send lower-camel-case keys; older ones send PascalCase.
    Both are accepted, unknown keys are ignored.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )

    @model_validator(mode='before')
    @classmethod
    def accept_legacy_casing(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                _lower_first(k) if isinstance(k, str) else k: v
                for k, v in data.items()
            }
        return data

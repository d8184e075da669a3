"""
Shared schema pieces.

Identifiers cross the HTTP boundary as decimal strings, never as JSON numbers,
so 64-bit ids survive JavaScript clients.
"""
from __future__ import annotations
from typing import Annotated, Any, Optional
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def _to_str_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


StrId = Annotated[str, BeforeValidator(_to_str_id)]
OptStrId = Annotated[Optional[str], BeforeValidator(_to_str_id)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; readable from ORM rows."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StatusMessage(CamelModel):
    status: str = "success"
    message: str

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Envelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
    data: Any = None


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def ok(data: Any = None, message: Optional[str] = None, count: Optional[int] = None) -> dict:
    """Build the success envelope; ``None`` members are left out."""
    envelope = Envelope(message=message, count=count, data=_dump(data))
    return envelope.model_dump(exclude_none=True)

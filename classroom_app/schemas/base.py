# classroom_app/schemas/base.py
"""Shared schema configuration and response envelopes."""
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, serializes camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str
    show_message: Optional[bool] = None


class BulkCreateResponse(MessageResponse):
    created_count: int

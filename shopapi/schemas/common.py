"""Base model configuration shared by request and response schemas."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

# Matches the String(255) name columns on users and products.
NAME_MAX_LENGTH = 255


class APIModel(BaseModel):
    """Wire model: camelCase on the wire, snake_case in Python, extras ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

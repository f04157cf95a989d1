"""Pydantic schemas and endpoint contracts for product routes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_core import PydanticCustomError

from shopapi.core.contracts import EndpointContract
from shopapi.schemas.common import APIModel
from shopapi.schemas.common import NAME_MAX_LENGTH


class ProductCreate(APIModel):
    """Payload to create a product owned by the caller."""

    name: str = Field(max_length=NAME_MAX_LENGTH)
    price: float = Field(allow_inf_nan=False)
    content: str | None = None

    @field_validator("price", mode="before")
    @classmethod
    def reject_boolean_price(cls, value: Any) -> Any:
        # JSON true/false would otherwise coerce to 1.0/0.0.
        if isinstance(value, bool):
            raise PydanticCustomError("float_type", "Input should be a valid number")
        return value


class Product(APIModel):
    """Product response payload."""

    id: int
    name: str
    price: float
    content: str | None = None
    owner_id: int
    created_at: datetime
    updated_at: datetime


CREATE_PRODUCT = EndpointContract(
    input_model=ProductCreate,
    outputs={201: Product},
    errors=(401, 404),
)

LIST_PRODUCTS = EndpointContract(outputs={200: list[Product]})

GET_PRODUCT = EndpointContract(outputs={200: Product}, errors=(404,))

"""Pydantic schemas and endpoint contracts for user routes."""

from __future__ import annotations

from pydantic import EmailStr
from pydantic import Field

from shopapi.core.contracts import EndpointContract
from shopapi.schemas.common import APIModel
from shopapi.schemas.common import NAME_MAX_LENGTH


class UserCreate(APIModel):
    """Payload to register a user."""

    email: EmailStr
    name: str = Field(max_length=NAME_MAX_LENGTH)
    password: str = Field(min_length=6)


class LoginRequest(APIModel):
    """Payload to exchange credentials for an access token."""

    email: EmailStr
    password: str


class User(APIModel):
    """Public user payload. Credential columns are not part of it."""

    id: int
    email: str
    name: str | None = None


class LoginResponse(APIModel):
    """Access token returned on successful login."""

    token: str


CREATE_USER = EndpointContract(
    input_model=UserCreate,
    outputs={201: User},
    errors=(409,),
)

LOGIN = EndpointContract(
    input_model=LoginRequest,
    outputs={200: LoginResponse},
    errors=(401,),
)

LIST_USERS = EndpointContract(outputs={200: list[User]})

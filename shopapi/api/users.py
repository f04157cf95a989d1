"""User API routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shopapi.api.deps import get_context
from shopapi.api.deps import get_db_session
from shopapi.core.context import AppContext
from shopapi.core.errors import AuthFailure
from shopapi.core.tokens import TokenClaims
from shopapi.schemas.user import CREATE_USER
from shopapi.schemas.user import LIST_USERS
from shopapi.schemas.user import LOGIN
from shopapi.schemas.user import LoginRequest
from shopapi.schemas.user import UserCreate
from shopapi.services.users import authenticate_user_service
from shopapi.services.users import list_users_service
from shopapi.services.users import register_user_service

router = APIRouter(prefix="/user", tags=["user"])


@router.post("", **CREATE_USER.route_options())
def register_user_endpoint(
    payload: UserCreate = Depends(CREATE_USER.body()),
    session: Session = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> JSONResponse:
    """Register a user."""
    user = register_user_service(session, context.hasher, payload)
    return CREATE_USER.render(201, user)


@router.get("", **LIST_USERS.route_options())
def list_users_endpoint(session: Session = Depends(get_db_session)) -> JSONResponse:
    """List users without credential fields."""
    return LIST_USERS.render(200, list_users_service(session))


@router.post("/login", **LOGIN.route_options())
def login_endpoint(
    payload: LoginRequest = Depends(LOGIN.body()),
    session: Session = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> JSONResponse:
    """Exchange email and password for an access token."""
    user = authenticate_user_service(session, context.hasher, payload)
    if user is None:
        raise AuthFailure()

    token = context.tokens.issue(TokenClaims(id=user.id, email=user.email, name=user.name))
    return LOGIN.render(200, {"token": token})

"""Shared FastAPI dependencies: context, sessions and the bearer guard."""

from __future__ import annotations

from collections.abc import Generator
import logging

from fastapi import Depends
from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer
from sqlalchemy.orm import Session

from shopapi.core.context import AppContext
from shopapi.core.errors import INVALID_TOKEN_MESSAGE
from shopapi.core.errors import AuthFailure
from shopapi.core.tokens import Rejected
from shopapi.core.tokens import TokenClaims

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    """Return the context installed on the app at startup."""
    return request.app.state.context


def get_db_session(context: AppContext = Depends(get_context)) -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    yield from context.database.session()


def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    context: AppContext = Depends(get_context),
) -> TokenClaims:
    """Reject the request with 401 unless it carries a valid bearer token."""
    token = credentials.credentials if credentials is not None else None
    result = context.tokens.authenticate(token)
    if isinstance(result, Rejected):
        logger.info("Rejected bearer token: %s", result.reason)
        raise AuthFailure(message=INVALID_TOKEN_MESSAGE)
    return result.claims

"""Service helpers for user registration and login."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from shopapi.core.security import CredentialHasher
from shopapi.db.errors import PersistenceError
from shopapi.db.models.user import User
from shopapi.db.repository.users import create_user
from shopapi.db.repository.users import get_user_by_email
from shopapi.db.repository.users import list_users
from shopapi.schemas.user import LoginRequest
from shopapi.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def register_user_service(session: Session, hasher: CredentialHasher, payload: UserCreate) -> User:
    """Hash the password and persist a new user."""
    credential = hasher.hash(payload.password)
    try:
        user = create_user(
            session,
            email=payload.email,
            name=payload.name,
            password=credential.digest.hex(),
            salt=credential.salt.hex(),
        )
        session.commit()
    except PersistenceError:
        session.rollback()
        raise

    logger.info("Registered user id=%s", user.id)
    return user


def authenticate_user_service(session: Session, hasher: CredentialHasher, payload: LoginRequest) -> User | None:
    """Return the user whose credentials match, otherwise ``None``.

    Both failure paths run exactly one key derivation.
    """
    user = get_user_by_email(session, payload.email)
    if user is None:
        hasher.verify_against_missing_account(payload.password)
        return None

    if not hasher.verify(payload.password, bytes.fromhex(user.salt), bytes.fromhex(user.password)):
        return None

    return user


def list_users_service(session: Session):
    """List public user projections."""
    return list_users(session)

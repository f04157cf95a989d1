"""Repository primitives for user entities."""

from __future__ import annotations

from sqlalchemy import Row
from sqlalchemy import select
from sqlalchemy.orm import Session

from shopapi.db.errors import flush
from shopapi.db.models.user import User


def create_user(
    session: Session,
    *,
    email: str,
    name: str | None,
    password: str,
    salt: str,
) -> User:
    """Create and return a user row. Raises ``DuplicateKeyError`` on a taken email."""
    user = User(email=email, name=name, password=password, salt=salt)
    session.add(user)
    flush(session)
    session.refresh(user)
    return user


def get_user(session: Session, user_id: int) -> User | None:
    """Fetch a user by id."""
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> User | None:
    """Fetch a user by email, including its credential columns."""
    return session.scalars(select(User).where(User.email == email)).one_or_none()


def list_users(
    session: Session,
    *,
    limit: int = 100,
    offset: int = 0,
) -> list[Row]:
    """List public user columns only; credential columns are never selected."""
    stmt = (
        select(User.id, User.email, User.name)
        .order_by(User.id)
        .limit(limit)
        .offset(offset)
    )
    return list(session.execute(stmt))

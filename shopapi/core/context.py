"""Process-wide application context."""

from __future__ import annotations

from dataclasses import dataclass

from shopapi.core.config import Settings
from shopapi.core.security import CredentialHasher
from shopapi.core.tokens import TokenIssuer
from shopapi.db.base import Database


@dataclass(frozen=True)
class AppContext:
    """Collaborators shared by every request, built once at startup."""

    settings: Settings
    database: Database
    hasher: CredentialHasher
    tokens: TokenIssuer

    def close(self) -> None:
        self.database.dispose()


def build_context(settings: Settings) -> AppContext:
    """Construct the context from settings."""
    return AppContext(
        settings=settings,
        database=Database(settings.database_url, echo=settings.sql_echo),
        hasher=CredentialHasher(),
        tokens=TokenIssuer(
            secret=settings.jwt_secret,
            expires_minutes=settings.jwt_expires_minutes,
        ),
    )

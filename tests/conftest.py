"""Shared pytest fixtures for shopapi test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shopapi.core.config import Settings  # noqa: E402
from shopapi.core.context import AppContext  # noqa: E402
from shopapi.core.security import CredentialHasher  # noqa: E402
from shopapi.core.tokens import TokenIssuer  # noqa: E402
from shopapi.db.base import Database  # noqa: E402

TEST_JWT_SECRET = "test-secret"
# Low iteration count keeps the suite fast; parameters are otherwise the production ones.
TEST_HASH_ITERATIONS = 1_000


def build_test_database() -> Database:
    """In-memory SQLite shared across threads so the app's worker pool sees one database."""
    database = Database(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    database.create_all()
    return database


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="development",
        database_url="sqlite+pysqlite://",
        jwt_secret=TEST_JWT_SECRET,
        log_level="WARNING",
    )


@pytest.fixture
def database() -> Generator[Database, None, None]:
    database = build_test_database()
    yield database
    database.dispose()


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(iterations=TEST_HASH_ITERATIONS)


@pytest.fixture
def context(settings: Settings, database: Database, hasher: CredentialHasher) -> AppContext:
    return AppContext(
        settings=settings,
        database=database,
        hasher=hasher,
        tokens=TokenIssuer(secret=settings.jwt_secret, expires_minutes=settings.jwt_expires_minutes),
    )


@pytest.fixture
def client(context: AppContext) -> Generator[TestClient, None, None]:
    """Provide an API test client bound to an in-memory database."""
    from shopapi.main import create_app

    with TestClient(create_app(context), raise_server_exceptions=False) as test_client:
        yield test_client

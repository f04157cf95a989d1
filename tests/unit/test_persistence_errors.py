"""Unit tests for integrity error classification."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from shopapi.db.errors import DuplicateKeyError
from shopapi.db.errors import RecordNotFoundError
from shopapi.db.errors import flush
from shopapi.db.errors import translate_integrity_error


class _PostgresError(Exception):
    def __init__(self, sqlstate: str, constraint: str | None) -> None:
        super().__init__("duplicate key value violates unique constraint")
        self.sqlstate = sqlstate
        self.diag = SimpleNamespace(constraint_name=constraint)


class _SqliteError(Exception):
    def __init__(self, message: str, error_name: str) -> None:
        super().__init__(message)
        self.sqlite_errorname = error_name


def _integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, orig)


def test_postgres_unique_violation_maps_constraint_to_fields() -> None:
    translated = translate_integrity_error(_integrity_error(_PostgresError("23505", "uq_users_email")))

    assert isinstance(translated, DuplicateKeyError)
    assert translated.fields == ("email",)
    assert translated.constraint == "uq_users_email"


def test_postgres_unique_violation_on_unmapped_constraint_keeps_category() -> None:
    translated = translate_integrity_error(_integrity_error(_PostgresError("23505", "uq_other")))

    assert isinstance(translated, DuplicateKeyError)
    assert translated.fields == ()


def test_postgres_foreign_key_violation_is_not_found() -> None:
    translated = translate_integrity_error(
        _integrity_error(_PostgresError("23503", "fk_products_owner_id_users"))
    )

    assert isinstance(translated, RecordNotFoundError)
    assert translated.constraint == "fk_products_owner_id_users"


def test_sqlite_unique_violation_reads_columns_from_message() -> None:
    orig = _SqliteError("UNIQUE constraint failed: users.email", "SQLITE_CONSTRAINT_UNIQUE")

    translated = translate_integrity_error(_integrity_error(orig))

    assert isinstance(translated, DuplicateKeyError)
    assert translated.fields == ("email",)


def test_sqlite_composite_unique_violation_lists_every_column() -> None:
    orig = _SqliteError("UNIQUE constraint failed: t.a, t.b", "SQLITE_CONSTRAINT_UNIQUE")

    translated = translate_integrity_error(_integrity_error(orig))

    assert isinstance(translated, DuplicateKeyError)
    assert translated.fields == ("a", "b")


def test_sqlite_foreign_key_violation_is_not_found() -> None:
    orig = _SqliteError("FOREIGN KEY constraint failed", "SQLITE_CONSTRAINT_FOREIGNKEY")

    assert isinstance(translate_integrity_error(_integrity_error(orig)), RecordNotFoundError)


@pytest.mark.parametrize(
    "orig",
    [
        _PostgresError("23502", None),
        _SqliteError("NOT NULL constraint failed: users.email", "SQLITE_CONSTRAINT_NOTNULL"),
        Exception("UNIQUE constraint failed: users.email"),
    ],
)
def test_unclassified_integrity_errors_are_left_alone(orig: Exception) -> None:
    assert translate_integrity_error(_integrity_error(orig)) is None


class _FlushingSession:
    def __init__(self, error: Exception | None) -> None:
        self._error = error

    def flush(self) -> None:
        if self._error is not None:
            raise self._error


def test_flush_raises_classified_error_chained_to_original() -> None:
    error = _integrity_error(_PostgresError("23505", "uq_users_email"))

    with pytest.raises(DuplicateKeyError) as excinfo:
        flush(_FlushingSession(error))  # type: ignore[arg-type]

    assert excinfo.value.__cause__ is error


def test_flush_reraises_unclassified_integrity_errors() -> None:
    error = _integrity_error(_PostgresError("23514", "ck_something"))

    with pytest.raises(IntegrityError):
        flush(_FlushingSession(error))  # type: ignore[arg-type]


def test_flush_passes_through_on_success() -> None:
    flush(_FlushingSession(None))  # type: ignore[arg-type]

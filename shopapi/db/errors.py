"""Structured persistence failures raised by repository primitives."""

from __future__ import annotations

from collections.abc import Sequence
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
SQLITE_UNIQUE_VIOLATIONS = frozenset({"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"})
SQLITE_FOREIGN_KEY_VIOLATION = "SQLITE_CONSTRAINT_FOREIGNKEY"

# Named unique constraints and the request fields they protect.
UNIQUE_CONSTRAINT_FIELDS: dict[str, tuple[str, ...]] = {
    "uq_users_email": ("email",),
}

# SQLite reports the violated columns only inside the message text.
_SQLITE_UNIQUE_COLUMNS = re.compile(r"UNIQUE constraint failed: (?P<columns>.+)$")


class PersistenceError(Exception):
    """Base class for classified persistence failures."""


class DuplicateKeyError(PersistenceError):
    """A unique constraint rejected the write."""

    def __init__(self, fields: Sequence[str], *, constraint: str | None = None) -> None:
        self.fields = tuple(fields)
        self.constraint = constraint
        super().__init__(f"Duplicate key on {', '.join(self.fields) or 'unknown field'}")


class RecordNotFoundError(PersistenceError):
    """A referenced or requested record does not exist."""

    def __init__(self, entity: str = "record", *, constraint: str | None = None) -> None:
        self.entity = entity
        self.constraint = constraint
        super().__init__(f"{entity} not found")


def _sqlstate(orig: object) -> str | None:
    # psycopg 3 exposes ``sqlstate``; psycopg2 exposes ``pgcode``.
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _constraint_name(orig: object) -> str | None:
    diag = getattr(orig, "diag", None)
    return getattr(diag, "constraint_name", None)


def _sqlite_unique_fields(orig: object) -> tuple[str, ...]:
    match = _SQLITE_UNIQUE_COLUMNS.search(str(orig))
    if match is None:
        return ()
    return tuple(column.strip().rpartition(".")[2] for column in match.group("columns").split(","))


def translate_integrity_error(exc: IntegrityError) -> PersistenceError | None:
    """Classify an ``IntegrityError`` by driver error code.

    Returns ``None`` for integrity failures that have no client-facing
    category (NOT NULL, CHECK); callers re-raise those unchanged.
    """
    orig = exc.orig
    sqlstate = _sqlstate(orig)
    constraint = _constraint_name(orig)

    if sqlstate == PG_UNIQUE_VIOLATION:
        fields = UNIQUE_CONSTRAINT_FIELDS.get(constraint or "", ())
        return DuplicateKeyError(fields, constraint=constraint)
    if sqlstate == PG_FOREIGN_KEY_VIOLATION:
        return RecordNotFoundError(constraint=constraint)

    error_name = getattr(orig, "sqlite_errorname", None)
    if error_name in SQLITE_UNIQUE_VIOLATIONS:
        return DuplicateKeyError(_sqlite_unique_fields(orig))
    if error_name == SQLITE_FOREIGN_KEY_VIOLATION:
        return RecordNotFoundError()

    return None


def flush(session: Session) -> None:
    """Flush pending writes, raising classified persistence errors."""
    try:
        session.flush()
    except IntegrityError as exc:
        translated = translate_integrity_error(exc)
        if translated is None:
            raise
        raise translated from exc

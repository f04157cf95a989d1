"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from shopapi.schemas.common import APIModel


class ValidationIssue(APIModel):
    """Single field-level validation issue."""

    field: str
    message: str


class ErrorEnvelope(APIModel):
    """Top-level API error response envelope."""

    status_code: int
    error: str
    message: str
    issues: list[ValidationIssue] | None = None

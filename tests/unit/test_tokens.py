"""Unit tests for bearer token issuing and verification."""

from __future__ import annotations

from datetime import datetime
from datetime import timedelta
from datetime import timezone

from jose import jwt
import pytest

from shopapi.core.tokens import Authenticated
from shopapi.core.tokens import Rejected
from shopapi.core.tokens import TokenClaims
from shopapi.core.tokens import TokenIssuer

SECRET = "unit-test-secret"


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(secret=SECRET, expires_minutes=30)


def test_issued_token_round_trips_claims(issuer: TokenIssuer) -> None:
    claims = TokenClaims(id=42, email="ada@shop.io", name="Ada")

    result = issuer.authenticate(issuer.issue(claims))

    assert result == Authenticated(claims=claims)


def test_issued_token_carries_subject_and_expiry(issuer: TokenIssuer) -> None:
    token = issuer.issue(TokenClaims(id=42, email="ada@shop.io", name=None))

    payload = jwt.decode(token, SECRET, algorithms=["HS256"])

    assert payload["sub"] == "42"
    assert payload["exp"] - payload["iat"] == 30 * 60


@pytest.mark.parametrize("token", [None, ""])
def test_missing_token_is_rejected(issuer: TokenIssuer, token: str | None) -> None:
    assert issuer.authenticate(token) == Rejected(reason="missing token")


def test_garbage_token_is_rejected(issuer: TokenIssuer) -> None:
    assert issuer.authenticate("not.a.jwt") == Rejected(reason="invalid token")


def test_token_signed_with_another_secret_is_rejected(issuer: TokenIssuer) -> None:
    other = TokenIssuer(secret="other-secret", expires_minutes=30)
    token = other.issue(TokenClaims(id=1, email="ada@shop.io", name="Ada"))

    assert issuer.authenticate(token) == Rejected(reason="invalid token")


def test_expired_token_is_rejected() -> None:
    two_hours_ago = datetime.now(timezone.utc) - timedelta(hours=2)
    stale = TokenIssuer(secret=SECRET, expires_minutes=30, clock=lambda: two_hours_ago)
    token = stale.issue(TokenClaims(id=1, email="ada@shop.io", name="Ada"))

    assert TokenIssuer(secret=SECRET, expires_minutes=30).authenticate(token) == Rejected(reason="token expired")


def test_token_with_non_numeric_subject_is_rejected(issuer: TokenIssuer) -> None:
    token = jwt.encode({"sub": "ada", "email": "ada@shop.io"}, SECRET, algorithm="HS256")

    assert issuer.authenticate(token) == Rejected(reason="malformed subject")


def test_token_without_email_is_rejected(issuer: TokenIssuer) -> None:
    token = jwt.encode({"sub": "1"}, SECRET, algorithm="HS256")

    assert issuer.authenticate(token) == Rejected(reason="malformed email claim")


@pytest.mark.parametrize(
    ("secret", "expires_minutes"),
    [("", 30), (SECRET, 0)],
)
def test_issuer_rejects_invalid_configuration(secret: str, expires_minutes: int) -> None:
    with pytest.raises(ValueError):
        TokenIssuer(secret=secret, expires_minutes=expires_minutes)

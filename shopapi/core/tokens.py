"""Bearer token issuing and verification."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import timezone
import logging

from jose import ExpiredSignatureError
from jose import JWTError
from jose import jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by an access token."""

    id: int
    email: str
    name: str | None


@dataclass(frozen=True)
class Authenticated:
    claims: TokenClaims


@dataclass(frozen=True)
class Rejected:
    reason: str


AuthResult = Authenticated | Rejected


class TokenIssuer:
    """Sign and verify HS256 access tokens."""

    def __init__(
        self,
        *,
        secret: str,
        expires_minutes: int,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("secret is required")
        if expires_minutes <= 0:
            raise ValueError("expires_minutes must be positive")
        self._secret = secret
        self._lifetime = timedelta(minutes=expires_minutes)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, claims: TokenClaims) -> str:
        """Return a signed token for ``claims``."""
        issued_at = self._clock()
        payload = {
            "sub": str(claims.id),
            "email": claims.email,
            "name": claims.name,
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def authenticate(self, token: str | None) -> AuthResult:
        """Verify a raw bearer token."""
        if not token:
            return Rejected(reason="missing token")

        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except ExpiredSignatureError:
            return Rejected(reason="token expired")
        except JWTError as exc:
            logger.debug("Token verification failed: %s", exc)
            return Rejected(reason="invalid token")

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return Rejected(reason="malformed subject")

        email = payload.get("email")
        if not isinstance(email, str):
            return Rejected(reason="malformed email claim")

        name = payload.get("name")
        return Authenticated(
            claims=TokenClaims(id=user_id, email=email, name=name if isinstance(name, str) else None)
        )

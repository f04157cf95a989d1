"""Password credential hashing and verification."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import NamedTuple

HASH_ALGORITHM = "sha512"
PBKDF2_ITERATIONS = 210_000
DIGEST_LENGTH = 64
SALT_LENGTH = 16

# Fixed salt for the unknown-account path. Never stored against a real account.
DECOY_SALT = bytes.fromhex("5d2f8c0e9a41b7d36e10f4a2c89b5e77")


class Credential(NamedTuple):
    """Digest and salt pair persisted for one account."""

    digest: bytes
    salt: bytes


class CredentialHasher:
    """PBKDF2-HMAC-SHA512 password hasher.

    ``hash`` and ``verify`` always share the instance's parameters, so a
    digest produced by one hasher is only reproducible by a hasher built with
    the same iteration count.
    """

    def __init__(self, *, iterations: int = PBKDF2_ITERATIONS) -> None:
        if iterations <= 0:
            raise ValueError("iterations must be positive")
        self._iterations = iterations

    @property
    def iterations(self) -> int:
        return self._iterations

    def derive(self, password: str, salt: bytes) -> bytes:
        """Derive the digest for ``password`` under ``salt``."""
        return hashlib.pbkdf2_hmac(
            HASH_ALGORITHM,
            password.encode("utf-8"),
            salt,
            self._iterations,
            dklen=DIGEST_LENGTH,
        )

    def hash(self, password: str) -> Credential:
        """Hash a new password with a freshly generated salt."""
        salt = secrets.token_bytes(SALT_LENGTH)
        return Credential(digest=self.derive(password, salt), salt=salt)

    def verify(self, candidate: str, salt: bytes, expected_digest: bytes) -> bool:
        """Check ``candidate`` against a stored digest in constant time."""
        return hmac.compare_digest(self.derive(candidate, salt), expected_digest)

    def verify_against_missing_account(self, candidate: str) -> bool:
        """Spend one full derivation and reject.

        Called when no account matches, so unknown-account and wrong-password
        logins take the same time.
        """
        hmac.compare_digest(self.derive(candidate, DECOY_SALT), bytes(DIGEST_LENGTH))
        return False

"""
Password hashing and verification.

New hashes use Argon2id (``argon2-cffi``) with the library's default cost
parameters; the salt is generated per call and embedded in the encoded
hash.  Legacy bcrypt hashes written by other systems sharing the account
table are still accepted on verify.
"""

from __future__ import annotations

import asyncio
import logging

import bcrypt
from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from auth.errors import InternalError

logger = logging.getLogger(__name__)

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """One-way salted hash + verify.

    ``verify`` returns ``False`` on a plain mismatch and only raises
    :class:`InternalError` for a malformed hash or a library failure, so a
    corrupt row is never reported to the client as a wrong password.
    """

    def __init__(self, hasher: Argon2Hasher | None = None) -> None:
        self._argon2 = hasher or Argon2Hasher()

    def hash(self, password: str) -> str:
        try:
            return self._argon2.hash(password)
        except HashingError as exc:
            raise InternalError(
                "PASSWORD_HASHING_ERROR",
                "Failed to process password. Please try again.",
                error="Password hashing failed",
                details=str(exc),
            ) from exc

    def verify(self, password_hash: str, password: str) -> bool:
        if password_hash.startswith(_BCRYPT_PREFIXES):
            return self._verify_bcrypt(password_hash, password)
        try:
            return self._argon2.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as exc:
            raise self._verification_failed(exc) from exc

    def needs_rehash(self, password_hash: str) -> bool:
        """True when the hash is bcrypt or uses outdated Argon2 parameters."""
        if password_hash.startswith(_BCRYPT_PREFIXES):
            return True
        try:
            return self._argon2.check_needs_rehash(password_hash)
        except InvalidHashError as exc:
            raise self._verification_failed(exc) from exc

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password_hash: str, password: str) -> bool:
        return await asyncio.to_thread(self.verify, password_hash, password)

    # ── internals ─────────────────────────────────────────────────────

    def _verify_bcrypt(self, password_hash: str, password: str) -> bool:
        # bcrypt only ever hashed the first 72 bytes.
        raw = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
        except ValueError as exc:
            raise self._verification_failed(exc) from exc

    @staticmethod
    def _verification_failed(exc: Exception) -> InternalError:
        logger.error("Password verification failed: %s", exc)
        return InternalError(
            "PASSWORD_VERIFICATION_ERROR",
            "An error occurred while verifying your password. Please try again.",
            error="Password verification failed",
            details=str(exc),
        )

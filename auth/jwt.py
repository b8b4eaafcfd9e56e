"""
Bearer token creation and verification.

Tokens are compact HS256 JWTs (``python-jose``) carrying the user's
``id``, ``email`` and ``role`` plus ``iat`` / ``exp``.  The secret comes
from ``Settings.jwt_secret`` (env var: ``JWT_SECRET``) and is handed in by
whoever builds the issuer. Nothing here reads configuration at import.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from auth.errors import AuthenticationError, InternalError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 7 * 24 * 60 * 60
REQUIRED_CLAIMS = ("id", "email", "role")


class TokenIssuer:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
    ) -> None:
        if not secret:
            raise ValueError("TokenIssuer requires a non-empty signing secret")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = timedelta(seconds=expiry_seconds)

    @classmethod
    def from_settings(cls, settings) -> "TokenIssuer":
        return cls(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiry_seconds=settings.jwt_expiry_seconds,
        )

    def sign(self, claims: Dict[str, Any], ttl: Optional[timedelta] = None) -> str:
        """Sign *claims* with an ``exp`` of now + *ttl* (default: the issuer TTL)."""
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + (ttl if ttl is not None else self.ttl)
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except JWTError as exc:
            logger.error("Token signing failed: %s", exc)
            raise InternalError(
                "TOKEN_GENERATION_ERROR",
                "Failed to generate authentication token. Please try again.",
                error="Token generation failed",
                details=str(exc),
            ) from exc

    def issue_for(self, user) -> str:
        """Token for a persisted user, with the same claim shape for signup and login."""
        return self.sign({"id": user.id, "email": user.email, "role": user.role})

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Return the token's claims.

        Raises ``AuthenticationError`` with code ``TOKEN_EXPIRED`` for an
        expired token and ``TOKEN_INVALID`` for anything tampered, malformed,
        or missing identity claims.
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise AuthenticationError(
                "TOKEN_EXPIRED",
                "Your session has expired. Please log in again.",
                error="Token expired",
            ) from exc
        except JWTError as exc:
            raise AuthenticationError(
                "TOKEN_INVALID",
                "Invalid authentication token.",
                error="Invalid token",
                details=str(exc),
            ) from exc

        missing = [c for c in REQUIRED_CLAIMS if c not in claims]
        if missing:
            raise AuthenticationError(
                "TOKEN_INVALID",
                "Invalid authentication token.",
                error="Invalid token",
                details=f"missing claims: {', '.join(missing)}",
            )
        return claims

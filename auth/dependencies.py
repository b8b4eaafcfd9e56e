"""
FastAPI dependencies for authentication.

Provides ``get_auth_service`` and ``get_current_claims`` dependencies that
are used across all auth and profile routes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.errors import AuthenticationError
from auth.jwt import TokenIssuer
from auth.service import AuthService

# auto_error=False so a missing header surfaces as our own TOKEN_MISSING 401.
_bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """
    Extract and verify the Bearer token, returning its claims
    (``id``, ``email``, ``role``).
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(
            "TOKEN_MISSING",
            "Access token required",
            error="Authentication required",
        )
    return tokens.verify(credentials.credentials)

"""
Auth API routes — signup, login.

Route prefix: /api/auth
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from auth.dependencies import get_auth_service
from auth.service import AuthService

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────
# Fields are optional on purpose: missing or malformed values are reported
# by auth.validation with specific reason codes instead of a generic 422.


class SignupRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: PublicUser


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    req: SignupRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user with email + password."""
    result = await service.signup(req.email, req.password, req.name)
    return {"message": "User created successfully", "token": result.token, "user": result.user}


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    result = await service.login(req.email, req.password)
    return {"message": "Login successful", "token": result.token, "user": result.user}

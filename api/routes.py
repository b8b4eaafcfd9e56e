"""
User profile and health routes.

Route prefix: /api/user (profile), / (health)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from auth.dependencies import get_auth_service, get_current_claims
from auth.service import AuthService

router = APIRouter(tags=["user"])
health_router = APIRouter(tags=["health"])


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


@router.get("/me")
async def get_me(
    claims: Dict[str, Any] = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Current user's profile."""
    return {"user": await service.get_profile(claims["id"])}


@router.put("/profile")
async def update_profile(
    req: ProfileUpdateRequest,
    claims: Dict[str, Any] = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Update name and/or phone; fields absent from the body are left alone."""
    # Explicit null clears a field, so go by what the client actually sent.
    fields = {name: getattr(req, name) for name in req.model_fields_set}
    user = await service.update_profile(claims["id"], **fields)
    return {"message": "Profile updated successfully", "user": user}


@health_router.get("/health")
async def health(request: Request) -> Dict[str, str]:
    db_ok = await request.app.state.db.ping()
    return {
        "status": "ok",
        "message": "Auth server running",
        "database": "ok" if db_ok else "unavailable",
    }

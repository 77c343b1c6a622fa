"""
Authentication Routes

POST /auth/login - Login and get JWT token
GET /auth/me - Get current admin info
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from careerhq.core.auth import ADMIN_ROLE, authenticate_admin, create_access_token, get_current_admin
from careerhq.core.config import get_settings
from careerhq.schemas.schemas import AdminResponse, LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    if not authenticate_admin(request.email, request.password):
        logger.warning("Failed admin login for %s", request.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": get_settings().admin_email, "role": ADMIN_ROLE})
    return TokenResponse(access_token=token)


@router.get("/me", response_model=AdminResponse)
async def get_me(admin: dict = Depends(get_current_admin)):
    """Get current admin info."""
    return AdminResponse(email=admin["email"], role=admin["role"])

"""
Authentication endpoints for the board administrator.

- POST /login: Exchange the admin username/password for a JWT access token
- GET /me: Return the admin the presented token belongs to
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from jobportal.core.config import settings
from jobportal.core.deps import get_current_admin
from jobportal.core.security import create_access_token, verify_admin_credentials
from jobportal.schemas.auth import AdminLoginRequest, AdminResponse, TokenResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(request: AdminLoginRequest):
    """
    Authenticate the administrator and return a JWT access token.

    The token must be sent as `Authorization: Bearer <token>` to create,
    update or delete job listings.
    """
    if not verify_admin_credentials(request.username, request.password):
        logger.warning(f"Failed admin login attempt for username '{request.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": request.username, "is_admin": True})
    logger.info(f"Admin {request.username} logged in")

    return TokenResponse(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )


@router.get("/me", response_model=AdminResponse)
def read_current_admin(admin: AdminResponse = Depends(get_current_admin)):
    """Return the authenticated administrator."""
    return admin

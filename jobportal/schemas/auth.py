"""
Pydantic schemas for admin authentication.
"""

from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    """Request schema for admin login."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class AdminResponse(BaseModel):
    """The authenticated admin."""
    username: str
    is_admin: bool = True

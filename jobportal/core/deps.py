"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect the mutating job endpoints.
"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from jobportal.core.config import settings
from jobportal.core.security import decode_token
from jobportal.schemas.auth import AdminResponse

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AdminResponse:
    """
    Validate the Bearer token and return the admin it was issued to.

    Raises:
        HTTPException 401: If the token is missing, invalid, expired or not an admin token
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

    username = payload.get("sub")
    if username != settings.ADMIN_USERNAME or not payload.get("is_admin"):
        raise credentials_exception

    return AdminResponse(username=username)

"""
Health check endpoints.

Provides detailed health status for the database and picture storage.
"""

import logging
from typing import Dict, Any
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import text

from jobportal.core.database import get_db
from jobportal.core.storage import StorageBackend, get_storage
from jobportal.crud import job_listing as job_crud

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    """
    return {
        "status": "healthy",
        "timestamp": _now()
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage)
) -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks database connectivity and storage availability, and reports the
    number of stored job listings.
    """
    health_status = {
        "status": "healthy",
        "timestamp": _now(),
        "checks": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
            "job_listings": job_crud.count(db)
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database error: {str(e)}"
        }

    try:
        storage.check_health()
        health_status["checks"]["storage"] = {
            "status": "healthy",
            "message": f"{type(storage).__name__} accessible"
        }
    except Exception as e:
        logger.error(f"Storage health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["storage"] = {
            "status": "unhealthy",
            "message": f"Storage error: {str(e)}"
        }

    return health_status

"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from jobportal.crud import job_listing

__all__ = ["job_listing"]

"""
Database models package.
"""

from jobportal.models.job_listing import JobListing

__all__ = ["JobListing"]

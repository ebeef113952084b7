"""
Python client for the Job Portal API.
"""

from jobportal.client.api_client import ClientDisplayError, JobNotFound, JobPortalClient, Unauthorized
from jobportal.client.session import AdminSession, LoginRequired, TokenStore

__all__ = [
    "AdminSession",
    "ClientDisplayError",
    "JobNotFound",
    "JobPortalClient",
    "LoginRequired",
    "TokenStore",
    "Unauthorized",
]

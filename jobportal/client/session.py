"""
Client side admin session.

Holds the admin access token in a small JSON file so the login survives
between runs, and gates every admin operation on it: without a token the
operation raises LoginRequired (the caller sends the user to the login
screen), and a token the server rejects is dropped the same way.
"""

import json
import logging
import os
from typing import Any, Dict, Optional, Union

from jobportal.client.api_client import (
    JobPortalClient,
    PictureUpload,
    Unauthorized,
)
from jobportal.core.config import settings
from jobportal.schemas.job_listing import (
    JobListingCreateResponse,
    JobListingFields,
    JobListingResponse,
)

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """Raised when an admin operation is attempted without a valid login."""
    pass


class TokenStore:
    """JSON file holding the current admin token."""

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(path or settings.CLIENT_SESSION_FILE)

    def load(self) -> Optional[Dict[str, str]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

        if not isinstance(data, dict) or not data.get("access_token"):
            return None
        return data

    def save(self, username: str, access_token: str) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"username": username, "access_token": access_token}, f)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


class AdminSession:
    """Login state plus the admin-only job operations."""

    def __init__(self, client: JobPortalClient, store: Optional[TokenStore] = None):
        self.client = client
        self.store = store or TokenStore()

        saved = self.store.load()
        if saved:
            self.client.set_token(saved["access_token"])

    @property
    def is_authenticated(self) -> bool:
        return self.store.load() is not None

    @property
    def username(self) -> Optional[str]:
        saved = self.store.load()
        return saved.get("username") if saved else None

    def login(self, username: str, password: str) -> None:
        """
        Log in with the admin credentials.

        Raises:
            Unauthorized: If the server rejects the credentials
        """
        token = self.client.login(username, password)
        self.store.save(username, token.access_token)
        self.client.set_token(token.access_token)
        logger.info(f"Logged in as {username}")

    def logout(self) -> None:
        self.store.clear()
        self.client.set_token(None)

    def require_login(self) -> None:
        if not self.is_authenticated:
            raise LoginRequired("Admin login required")

    def _call(self, operation, *args, **kwargs):
        self.require_login()
        try:
            return operation(*args, **kwargs)
        except Unauthorized as e:
            # Expired or revoked token
            self.logout()
            raise LoginRequired(str(e)) from e

    def create_job(
        self,
        fields: Union[JobListingFields, Dict[str, Any]],
        picture: Optional[PictureUpload] = None
    ) -> JobListingCreateResponse:
        return self._call(self.client.create_job, fields, picture)

    def update_job(
        self,
        job_id: int,
        fields: Union[JobListingFields, Dict[str, Any]],
        picture: Optional[PictureUpload] = None
    ) -> JobListingResponse:
        return self._call(self.client.update_job, job_id, fields, picture)

    def delete_job(self, job_id: int, confirmed: bool = False) -> str:
        """
        Delete a job listing.

        Deletion needs explicit confirmation; without it nothing is sent.
        """
        if not confirmed:
            raise ValueError("Deleting a job must be confirmed")
        return self._call(self.client.delete_job, job_id)

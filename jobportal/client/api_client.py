"""
HTTP client for the Job Portal API.

Wraps every endpoint in a method returning the same pydantic schemas the
server uses. Failures are raised as ClientDisplayError, whose message is
meant to be shown to the user as is; nothing is retried.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union
import httpx

from jobportal.core.config import settings
from jobportal.schemas.auth import AdminResponse, TokenResponse
from jobportal.schemas.job_listing import (
    DEFAULT_PAGE_SIZE,
    JobListingCreateResponse,
    JobListingFields,
    JobListingPage,
    JobListingResponse,
    SortDirection,
    SortKey,
)

logger = logging.getLogger(__name__)

# (filename, content, content_type)
PictureUpload = Tuple[str, bytes, str]


class ClientDisplayError(Exception):
    """A request failed; str(error) is the text to show."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class JobNotFound(ClientDisplayError):
    pass


class Unauthorized(ClientDisplayError):
    pass


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        return response.text or response.reason_phrase
    if isinstance(detail, list):
        # FastAPI validation errors
        return "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', []))}: {err.get('msg')}"
            for err in detail
        )
    return str(detail)


def _form_data(fields: Union[JobListingFields, Dict[str, Any]]) -> Dict[str, str]:
    if not isinstance(fields, JobListingFields):
        fields = JobListingFields(**fields)
    return {
        name: str(value)
        for name, value in fields.model_dump(mode="json", exclude_none=True).items()
    }


class JobPortalClient:
    """
    Thin synchronous client for the REST API.

    Args:
        base_url: API root (default: CLIENT_API_URL)
        http: Preconfigured httpx.Client, e.g. a FastAPI TestClient
        token: Admin access token sent with every request
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        token: Optional[str] = None,
        api_prefix: Optional[str] = None
    ):
        self.http = http or httpx.Client(
            base_url=base_url or settings.CLIENT_API_URL,
            timeout=settings.CLIENT_TIMEOUT_SECONDS
        )
        self.api_prefix = (api_prefix if api_prefix is not None else settings.API_PREFIX).rstrip("/")
        self.token = token

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        self.http.close()

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.http.request(method, f"{self.api_prefix}{path}", headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ClientDisplayError(f"Could not reach the job portal: {e}") from e

        if response.status_code == 404:
            raise JobNotFound(_error_detail(response), status_code=404)
        if response.status_code == 401:
            raise Unauthorized(_error_detail(response), status_code=401)
        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error(f"{method} {path} returned {response.status_code}: {detail}")
            raise ClientDisplayError(detail, status_code=response.status_code)

        return response

    def list_jobs(self) -> List[JobListingResponse]:
        response = self._request("GET", "/jobs")
        return [JobListingResponse.model_validate(item) for item in response.json()]

    def list_page(
        self,
        sort: SortKey = SortKey.CREATED_AT,
        direction: SortDirection = SortDirection.DESC,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE
    ) -> JobListingPage:
        params = {
            "sort": SortKey(sort).value,
            "direction": SortDirection(direction).value,
            "page": page,
            "page_size": page_size,
        }
        response = self._request("GET", "/jobs/page", params=params)
        return JobListingPage.model_validate(response.json())

    def get_job(self, job_id: int) -> JobListingResponse:
        response = self._request("GET", f"/jobs/{job_id}")
        return JobListingResponse.model_validate(response.json())

    def create_job(
        self,
        fields: Union[JobListingFields, Dict[str, Any]],
        picture: Optional[PictureUpload] = None
    ) -> JobListingCreateResponse:
        files = {"picture": picture} if picture else None
        response = self._request("POST", "/jobs", data=_form_data(fields), files=files)
        return JobListingCreateResponse.model_validate(response.json())

    def update_job(
        self,
        job_id: int,
        fields: Union[JobListingFields, Dict[str, Any]],
        picture: Optional[PictureUpload] = None
    ) -> JobListingResponse:
        files = {"picture": picture} if picture else None
        response = self._request("PUT", f"/jobs/{job_id}", data=_form_data(fields), files=files)
        return JobListingResponse.model_validate(response.json())

    def delete_job(self, job_id: int) -> str:
        response = self._request("DELETE", f"/jobs/{job_id}")
        return response.json()["message"]

    def login(self, username: str, password: str) -> TokenResponse:
        response = self._request("POST", "/auth/login", json={"username": username, "password": password})
        return TokenResponse.model_validate(response.json())

    def me(self) -> AdminResponse:
        response = self._request("GET", "/auth/me")
        return AdminResponse.model_validate(response.json())

"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- In-memory picture storage
- Admin authentication headers
"""

import os
import tempfile

# Keep LocalStorage and the /uploads mount out of the working directory
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="jobportal-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobportal.core.config import settings
from jobportal.core.database import Base, get_db
from jobportal.core.storage import StorageBackend, StorageError, build_object_key, get_storage
from jobportal.models.job_listing import JobListing  # noqa: F401
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class InMemoryStorage(StorageBackend):
    """Storage backend that keeps uploads in a dict and returns S3-style URLs"""

    def __init__(self):
        self.objects = {}

    def upload_file(self, data, filename, content_type=None, folder=None):
        key = build_object_key(folder or settings.PICTURE_FOLDER, filename, timestamp_ms=1700000000000 + len(self.objects))
        self.objects[key] = (data, content_type)
        return f"https://test-bucket.s3.us-east-1.amazonaws.com/{key}"

    def check_health(self):
        return None


class FailingStorage(StorageBackend):
    """Storage backend whose provider always rejects the upload"""

    def upload_file(self, data, filename, content_type=None, folder=None):
        raise StorageError("Failed to upload file to S3: AccessDenied")

    def check_health(self):
        raise StorageError("S3 bucket test-bucket is not accessible")


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def client(db_session, storage):
    """
    FastAPI test client with overridden database and storage dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def failing_storage(client):
    """Swap the storage backend for one that fails every upload."""
    app.dependency_overrides[get_storage] = lambda: FailingStorage()
    return client


@pytest.fixture
def admin_token(client):
    response = client.post(
        "/api/auth/login",
        json={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def sample_job_data():
    """Sample job listing form data"""
    return {
        "post_date": "2024-01-01",
        "organisation": "Acme",
        "job_details": "Junior Engineer, water treatment division",
        "vacancies": "12",
        "location": "Pune, Maharashtra",
        "qualification": "B.E. Civil",
        "last_date": "2024-02-01",
        "salary": "Rs 35,000 - 45,000 per month",
        "more_details": "Selection by written test and interview.",
        "notification_link": "https://example.com/notification.pdf",
        "apply_link": "https://example.com/apply",
    }


@pytest.fixture
def sample_picture():
    return ("logo.png", b"\x89PNG\r\n\x1a\nfake-image-bytes", "image/png")

"""
Test suite for job listing endpoints.

Tests cover:
- Job creation with and without a picture
- Job retrieval and listing
- Full-record update and picture preservation
- Deletion
- Server-side sorted pages
- Error handling
"""

import pytest
from datetime import date
from sqlalchemy.exc import OperationalError

from jobportal.core.config import settings
from jobportal.crud import job_listing as job_crud
from jobportal.models.job_listing import JobListing


def create_job(client, headers, data, picture=None):
    files = {"picture": picture} if picture else None
    return client.post("/api/jobs", data=data, files=files, headers=headers)


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_returns_id_and_created_at(self, client, admin_headers):
        """Minimal listing without a picture"""
        response = create_job(client, admin_headers, {
            "organisation": "Acme",
            "post_date": "2024-01-01",
            "last_date": "2024-02-01",
        })

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"id", "created_at"}
        assert isinstance(data["id"], int)

        job = client.get(f"/api/jobs/{data['id']}").json()
        assert job["organisation"] == "Acme"
        assert job["post_date"] == "2024-01-01"
        assert job["last_date"] == "2024-02-01"
        assert job["picture"] is None

    def test_get_after_create_returns_submitted_values(self, client, admin_headers, sample_job_data):
        job_id = create_job(client, admin_headers, sample_job_data).json()["id"]

        job = client.get(f"/api/jobs/{job_id}").json()
        for field, value in sample_job_data.items():
            if field == "vacancies":
                assert job[field] == int(value)
            else:
                assert job[field] == value

    def test_create_job_with_picture(self, client, admin_headers, sample_job_data, sample_picture, storage):
        response = create_job(client, admin_headers, sample_job_data, picture=sample_picture)
        assert response.status_code == 201

        job = client.get(f"/api/jobs/{response.json()['id']}").json()
        assert job["picture"].startswith("https://test-bucket.s3.us-east-1.amazonaws.com/job_pictures/")
        assert job["picture"].endswith("-logo.png")

        (key, (data, content_type)), = storage.objects.items()
        assert key.startswith("job_pictures/")
        assert data == sample_picture[1]
        assert content_type == "image/png"

    def test_blank_fields_are_stored_as_null(self, client, admin_headers):
        response = create_job(client, admin_headers, {
            "organisation": "Acme",
            "vacancies": "",
            "salary": "   ",
        })
        job = client.get(f"/api/jobs/{response.json()['id']}").json()

        assert job["vacancies"] is None
        assert job["salary"] is None

    def test_invalid_vacancies_rejected(self, client, admin_headers):
        response = create_job(client, admin_headers, {"organisation": "Acme", "vacancies": "many"})
        assert response.status_code == 422

    def test_invalid_date_rejected(self, client, admin_headers):
        response = create_job(client, admin_headers, {"organisation": "Acme", "post_date": "next week"})
        assert response.status_code == 422

    def test_picture_over_size_limit(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 1)
        big = ("big.jpg", b"x" * (1024 * 1024 + 1), "image/jpeg")

        response = create_job(client, admin_headers, {"organisation": "Acme"}, picture=big)

        assert response.status_code == 413
        assert client.get("/api/jobs").json() == []

    def test_storage_failure_aborts_before_insert(self, failing_storage, admin_headers, sample_job_data, sample_picture):
        client = failing_storage
        response = create_job(client, admin_headers, sample_job_data, picture=sample_picture)

        assert response.status_code == 500
        assert "AccessDenied" in response.json()["detail"]
        assert client.get("/api/jobs").json() == []

    def test_database_failure_returns_500(self, client, admin_headers, monkeypatch):
        def broken_create(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("connection refused"))

        monkeypatch.setattr(job_crud, "create", broken_create)
        response = create_job(client, admin_headers, {"organisation": "Acme"})

        assert response.status_code == 500
        assert "Error inserting job data" in response.json()["detail"]


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_get_nonexistent_job(self, client):
        response = client.get("/api/jobs/99999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Job not found"

    def test_list_jobs_empty(self, client):
        response = client.get("/api/jobs")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_jobs_counts_non_deleted(self, client, admin_headers, sample_job_data):
        ids = [create_job(client, admin_headers, sample_job_data).json()["id"] for _ in range(4)]
        client.delete(f"/api/jobs/{ids[1]}", headers=admin_headers)

        data = client.get("/api/jobs").json()
        assert len(data) == 3
        assert [job["id"] for job in data] == [ids[0], ids[2], ids[3]]

    def test_reads_do_not_need_auth(self, client, db_session):
        db_session.add(JobListing(organisation="Acme"))
        db_session.commit()

        assert client.get("/api/jobs").status_code == 200
        assert client.get("/api/jobs/1").status_code == 200


class TestJobUpdate:
    """Tests for full-record update"""

    def test_update_overwrites_fields(self, client, admin_headers, sample_job_data):
        job_id = create_job(client, admin_headers, sample_job_data).json()["id"]

        response = client.put(f"/api/jobs/{job_id}", data={
            "organisation": "Acme Water Board",
            "post_date": "2024-01-05",
            "last_date": "2024-03-01",
            "vacancies": "3",
        }, headers=admin_headers)

        assert response.status_code == 200
        job = response.json()
        assert job["id"] == job_id
        assert job["organisation"] == "Acme Water Board"
        assert job["vacancies"] == 3
        assert job["last_date"] == "2024-03-01"
        # Omitted fields are cleared
        assert job["location"] is None
        assert job["job_details"] is None
        assert job["apply_link"] is None

    def test_update_keeps_created_at(self, client, admin_headers, sample_job_data):
        created = create_job(client, admin_headers, sample_job_data).json()

        updated = client.put(f"/api/jobs/{created['id']}", data=sample_job_data, headers=admin_headers).json()

        assert updated["created_at"] == client.get(f"/api/jobs/{created['id']}").json()["created_at"]
        assert updated["created_at"] is not None

    def test_update_without_picture_preserves_it(self, client, admin_headers, sample_job_data, sample_picture):
        job_id = create_job(client, admin_headers, sample_job_data, picture=sample_picture).json()["id"]
        original = client.get(f"/api/jobs/{job_id}").json()["picture"]

        job = client.put(f"/api/jobs/{job_id}", data={"organisation": "Acme"}, headers=admin_headers).json()

        assert original is not None
        assert job["picture"] == original

    def test_update_with_picture_replaces_it(self, client, admin_headers, sample_job_data, sample_picture):
        job_id = create_job(client, admin_headers, sample_job_data, picture=sample_picture).json()["id"]
        original = client.get(f"/api/jobs/{job_id}").json()["picture"]

        response = client.put(
            f"/api/jobs/{job_id}",
            data=sample_job_data,
            files={"picture": ("banner.jpg", b"new-image", "image/jpeg")},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["picture"] != original
        assert response.json()["picture"].endswith("-banner.jpg")

    def test_update_nonexistent_job(self, client, admin_headers, sample_job_data, storage):
        response = client.put("/api/jobs/99999", data=sample_job_data, headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Job not found"
        assert client.get("/api/jobs").json() == []
        assert storage.objects == {}

    def test_update_storage_failure_leaves_row_untouched(self, failing_storage, admin_headers, sample_job_data, sample_picture):
        client = failing_storage
        # No picture, so the failing backend is not touched yet
        job_id = create_job(client, admin_headers, sample_job_data).json()["id"]

        response = client.put(
            f"/api/jobs/{job_id}",
            data={"organisation": "Changed"},
            files={"picture": sample_picture},
            headers=admin_headers
        )

        assert response.status_code == 500
        assert client.get(f"/api/jobs/{job_id}").json()["organisation"] == "Acme"

    def test_update_lookup_failure_returns_500(self, client, admin_headers, sample_job_data, monkeypatch):
        def broken_get_by_id(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(job_crud, "get_by_id", broken_get_by_id)
        response = client.put("/api/jobs/1", data=sample_job_data, headers=admin_headers)

        assert response.status_code == 500
        assert "Error updating job" in response.json()["detail"]
        assert "connection lost" in response.json()["detail"]

    def test_update_with_empty_picture_keeps_existing(self, client, admin_headers, sample_job_data, sample_picture, storage):
        job_id = create_job(client, admin_headers, sample_job_data, picture=sample_picture).json()["id"]
        original = client.get(f"/api/jobs/{job_id}").json()["picture"]

        response = client.put(
            f"/api/jobs/{job_id}",
            data=sample_job_data,
            files={"picture": ("empty.png", b"", "image/png")},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["picture"] == original
        assert len(storage.objects) == 1


class TestJobDeletion:
    """Tests for job deletion"""

    def test_delete_job(self, client, admin_headers, sample_job_data):
        job_id = create_job(client, admin_headers, sample_job_data).json()["id"]

        response = client.delete(f"/api/jobs/{job_id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Job deleted successfully"}

        get_response = client.get(f"/api/jobs/{job_id}")
        assert get_response.status_code == 404

    def test_delete_nonexistent_job(self, client, admin_headers):
        response = client.delete("/api/jobs/99999", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Job not found"


class TestJobAuthorization:
    """Mutating endpoints require an admin token"""

    @pytest.mark.parametrize("method,path", [
        ("post", "/api/jobs"),
        ("put", "/api/jobs/1"),
        ("delete", "/api/jobs/1"),
    ])
    def test_requires_token(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_rejects_garbage_token(self, client, sample_job_data):
        response = create_job(client, {"Authorization": "Bearer not-a-jwt"}, sample_job_data)
        assert response.status_code == 401

    def test_unauthorized_delete_keeps_row(self, client, db_session):
        db_session.add(JobListing(organisation="Acme"))
        db_session.commit()

        assert client.delete("/api/jobs/1").status_code == 401
        assert client.get("/api/jobs/1").status_code == 200


class TestJobPage:
    """Tests for the server-side sorted, paged listing"""

    @pytest.fixture
    def many_jobs(self, db_session):
        jobs = [
            JobListing(
                organisation=f"Org {i}",
                vacancies=i % 7 if i % 10 else None,
                post_date=date(2024, 1, 1 + i % 28),
                last_date=date(2024, 3, 1 + i % 28),
            )
            for i in range(45)
        ]
        db_session.add_all(jobs)
        db_session.commit()
        return jobs

    def test_page_sizes_for_45_records(self, client, many_jobs):
        sizes = []
        for page in (1, 2, 3):
            data = client.get(f"/api/jobs/page?page={page}&page_size=20").json()
            assert data["total"] == 45
            assert data["total_pages"] == 3
            sizes.append(len(data["items"]))

        assert sizes == [20, 20, 5]

    def test_defaults(self, client, many_jobs):
        data = client.get("/api/jobs/page").json()

        assert data["page"] == 1
        assert data["page_size"] == 20
        assert len(data["items"]) == 20

    def test_sort_by_vacancies(self, client, many_jobs):
        asc = client.get("/api/jobs/page?sort=vacancies&direction=asc&page_size=5").json()["items"]
        desc = client.get("/api/jobs/page?sort=vacancies&direction=desc&page_size=5").json()["items"]

        # Missing vacancies come first ascending
        assert [job["vacancies"] for job in asc] == [None] * 5
        assert [job["vacancies"] for job in desc] == [6, 6, 6, 6, 6]

    def test_sort_by_last_date(self, client, many_jobs):
        items = client.get("/api/jobs/page?sort=last_date&direction=asc&page_size=20").json()["items"]
        dates = [job["last_date"] for job in items]

        assert dates == sorted(dates)

    def test_page_beyond_last_is_empty(self, client, many_jobs):
        data = client.get("/api/jobs/page?page=9&page_size=20").json()

        assert data["items"] == []
        assert data["total_pages"] == 3

    def test_empty_table(self, client):
        data = client.get("/api/jobs/page").json()

        assert data["total"] == 0
        assert data["total_pages"] == 0

    @pytest.mark.parametrize("query", [
        "page_size=7",
        "page=0",
        "sort=organisation",
        "direction=sideways",
    ])
    def test_invalid_parameters(self, client, query):
        response = client.get(f"/api/jobs/page?{query}")
        assert response.status_code == 422

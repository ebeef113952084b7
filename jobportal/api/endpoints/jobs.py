"""
API endpoints for job listings.

Reads are public. Creating, updating and deleting a listing requires an admin
token (see /auth/login). Create and update accept multipart form data with an
optional `picture` file, which is uploaded to storage before the database write.
"""

import logging
from typing import List, Optional, Tuple
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobportal.core.config import settings
from jobportal.core.database import get_db
from jobportal.core.deps import get_current_admin
from jobportal.core.storage import StorageBackend, StorageError, get_storage
from jobportal.crud import job_listing as job_crud
from jobportal.schemas.auth import AdminResponse
from jobportal.schemas.job_listing import (
    JobListingCreateResponse,
    JobListingFields,
    JobListingPage,
    JobListingResponse,
    MessageResponse,
    DEFAULT_PAGE_SIZE,
    SortDirection,
    SortKey,
)
from jobportal.services.listing import page_count, validate_page_size

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def job_listing_form(
    post_date: Optional[str] = Form(None),
    organisation: Optional[str] = Form(None),
    job_details: Optional[str] = Form(None),
    vacancies: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    qualification: Optional[str] = Form(None),
    last_date: Optional[str] = Form(None),
    salary: Optional[str] = Form(None),
    more_details: Optional[str] = Form(None),
    notification_link: Optional[str] = Form(None),
    apply_link: Optional[str] = Form(None),
) -> JobListingFields:
    """Collect the multipart form fields into a validated JobListingFields."""
    try:
        return JobListingFields(
            post_date=post_date,
            organisation=organisation,
            job_details=job_details,
            vacancies=vacancies,
            location=location,
            qualification=qualification,
            last_date=last_date,
            salary=salary,
            more_details=more_details,
            notification_link=notification_link,
            apply_link=apply_link,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


async def read_picture(picture: Optional[UploadFile]) -> Optional[Tuple[bytes, str, Optional[str]]]:
    """
    Read an uploaded picture into memory.

    Returns None when no file was chosen, otherwise (data, filename, content_type).
    A zero-byte file is treated the same as no file: nothing is uploaded and
    on update the existing picture is kept.

    Raises:
        HTTPException 413: If the file exceeds MAX_UPLOAD_SIZE_MB
    """
    if picture is None or not picture.filename:
        return None

    limit = settings.MAX_UPLOAD_SIZE_BYTES
    data = await picture.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Picture exceeds the {settings.MAX_UPLOAD_SIZE_MB} MB upload limit"
        )
    if not data:
        return None

    return data, picture.filename, picture.content_type


def upload_picture(storage: StorageBackend, upload: Tuple[bytes, str, Optional[str]]) -> str:
    data, filename, content_type = upload
    picture_url = storage.upload_file(data, filename, content_type, folder=settings.PICTURE_FOLDER)
    logger.info(f"Uploaded picture {filename} to {picture_url}")
    return picture_url


@router.get("", response_model=List[JobListingResponse])
def list_jobs(db: Session = Depends(get_db)):
    """
    List every job listing.

    The whole table is returned; sorting and pagination happen client side.
    Use /jobs/page for a sorted, paged slice instead.
    """
    try:
        return job_crud.get_all(db)
    except Exception as e:
        logger.error(f"Error fetching jobs: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching jobs: {str(e)}")


@router.get("/page", response_model=JobListingPage)
def list_jobs_page(
    sort: SortKey = SortKey.CREATED_AT,
    direction: SortDirection = SortDirection.DESC,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """
    Return one page of job listings sorted by the given column.

    Args:
        sort: created_at, post_date, last_date or vacancies (default: created_at)
        direction: asc or desc (default: desc)
        page: 1-based page number
        page_size: 5, 10 or 20 (default: 20)
    """
    try:
        validate_page_size(page_size)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        items, total = job_crud.get_page(
            db,
            sort=sort,
            direction=direction,
            skip=(page - 1) * page_size,
            limit=page_size
        )
    except Exception as e:
        logger.error(f"Error fetching job page: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching jobs: {str(e)}")

    return JobListingPage(
        items=[JobListingResponse.model_validate(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=page_count(total, page_size)
    )


@router.get("/{job_id}", response_model=JobListingResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job listing by ID."""
    try:
        job = job_crud.get_by_id(db, job_id)
    except Exception as e:
        logger.error(f"Error fetching job details: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching job details: {str(e)}")

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.post("", status_code=201, response_model=JobListingCreateResponse)
async def create_job(
    admin: AdminResponse = Depends(get_current_admin),
    fields: JobListingFields = Depends(job_listing_form),
    picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage)
):
    """
    Create a job listing.

    Flow:
    1. Read the optional picture into memory (max MAX_UPLOAD_SIZE_MB)
    2. Upload it to storage and keep the public URL
    3. Insert the row; id and created_at are assigned by the database

    An upload that succeeds followed by a failed insert leaves the stored
    picture behind.
    """
    upload = await read_picture(picture)

    try:
        picture_url = upload_picture(storage, upload) if upload else None
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Error uploading picture: {str(e)}")

    try:
        job = job_crud.create(db, fields, picture_url)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inserting job data: {e}")
        raise HTTPException(status_code=500, detail=f"Error inserting job data: {str(e)}")

    logger.info(f"Admin {admin.username} created job {job.id}: {job.organisation}")
    return JobListingCreateResponse(id=job.id, created_at=job.created_at)


@router.put("/{job_id}", response_model=JobListingResponse)
async def update_job(
    job_id: int,
    admin: AdminResponse = Depends(get_current_admin),
    fields: JobListingFields = Depends(job_listing_form),
    picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage)
):
    """
    Replace a job listing with the submitted form.

    Every field is overwritten (omitted fields become null) except the
    picture, which is kept unless a new file is uploaded.
    """
    try:
        existing = job_crud.get_by_id(db, job_id)
    except Exception as e:
        logger.error(f"Error fetching job {job_id} for update: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating job: {str(e)}")

    if not existing:
        raise HTTPException(status_code=404, detail="Job not found")

    upload = await read_picture(picture)

    try:
        picture_url = upload_picture(storage, upload) if upload else None
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Error uploading picture: {str(e)}")

    try:
        job = job_crud.update(db, job_id, fields, picture_url)
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating job {job_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating job: {str(e)}")

    # Deleted between the existence check and the write
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Admin {admin.username} updated job {job_id}")
    return job


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: int,
    admin: AdminResponse = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete a job listing by ID."""
    try:
        deleted = job_crud.delete(db, job_id)
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting job {job_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete the job")

    if not deleted:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Admin {admin.username} deleted job {job_id}")
    return MessageResponse(message="Job deleted successfully")

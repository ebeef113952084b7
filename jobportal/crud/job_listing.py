"""
CRUD operations for the JobListing model.

Implements the Repository pattern to encapsulate all database operations
for job listings, providing a clean interface for the API layer.
"""

from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from jobportal.models.job_listing import JobListing
from jobportal.schemas.job_listing import JobListingFields, SortDirection, SortKey


def create(db: Session, fields: JobListingFields, picture_url: Optional[str] = None) -> JobListing:
    """
    Insert a new job listing.

    Args:
        db: Database session
        fields: Validated form fields
        picture_url: Public URL of the uploaded picture, if any

    Returns:
        Created JobListing with server-assigned id and created_at
    """
    db_job = JobListing(**fields.model_dump(), picture=picture_url)

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[JobListing]:
    """Retrieve a job listing by its ID, or None."""
    return db.query(JobListing).filter(JobListing.id == job_id).first()


def get_all(db: Session) -> List[JobListing]:
    """Retrieve every job listing in store order."""
    return db.query(JobListing).order_by(JobListing.id).all()


def get_page(
    db: Session,
    sort: SortKey = SortKey.CREATED_AT,
    direction: SortDirection = SortDirection.DESC,
    skip: int = 0,
    limit: int = 20
) -> Tuple[List[JobListing], int]:
    """
    Retrieve one sorted page of job listings.

    Nulls sort first ascending and last descending; ties fall back to id.

    Returns:
        Tuple of (listings on the page, total listing count)
    """
    column = getattr(JobListing, sort.value)
    if direction == SortDirection.ASC:
        order = column.asc().nulls_first()
    else:
        order = column.desc().nulls_last()

    total = db.query(JobListing).count()
    items = (
        db.query(JobListing)
        .order_by(order, JobListing.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def update(
    db: Session,
    job_id: int,
    fields: JobListingFields,
    picture_url: Optional[str] = None
) -> Optional[JobListing]:
    """
    Overwrite a job listing with the submitted fields.

    Every field is replaced, omitted ones become null. The picture is only
    replaced when a new URL is given.

    Returns:
        Updated JobListing if found, None otherwise
    """
    job = get_by_id(db, job_id)
    if not job:
        return None

    for name, value in fields.model_dump().items():
        setattr(job, name, value)
    if picture_url is not None:
        job.picture = picture_url

    db.commit()
    db.refresh(job)

    return job


def delete(db: Session, job_id: int) -> bool:
    """
    Delete a job listing by ID.

    Returns:
        True if deleted, False if not found
    """
    deleted = db.query(JobListing).filter(JobListing.id == job_id).delete()
    db.commit()

    return deleted > 0


def count(db: Session) -> int:
    return db.query(JobListing).count()

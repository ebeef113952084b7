from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional
from datetime import date, datetime
from enum import Enum


PAGE_SIZES = (5, 10, 20)
DEFAULT_PAGE_SIZE = 20


class SortKey(str, Enum):
    """Columns a job listing can be sorted by"""
    CREATED_AT = "created_at"
    POST_DATE = "post_date"
    LAST_DATE = "last_date"
    VACANCIES = "vacancies"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class JobListingFields(BaseModel):
    """
    Editable fields of a job listing, as submitted by the admin form.

    Form values arrive as strings: blanks are treated as "not supplied" and
    stored as null, vacancies and the two dates are coerced to their types.
    """
    post_date: Optional[date] = None
    organisation: Optional[str] = None
    job_details: Optional[str] = None
    vacancies: Optional[int] = None
    location: Optional[str] = None
    qualification: Optional[str] = None
    last_date: Optional[date] = None
    salary: Optional[str] = None
    more_details: Optional[str] = None
    notification_link: Optional[str] = None
    apply_link: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class JobListingResponse(JobListingFields):
    """Schema for a stored job listing"""
    id: int
    created_at: datetime
    picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class JobListingCreateResponse(BaseModel):
    """Schema for job creation response"""
    id: int
    created_at: datetime


class JobListingPage(BaseModel):
    """One server-side page of sorted job listings"""
    items: List[JobListingResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str

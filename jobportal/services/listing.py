"""
Sorting and pagination of job listings.

ListView is the view-model behind the listing tables: it holds the full
result of "list jobs" plus the active sort column, direction, page size and
current page, and hands back the rows to display. page_count and
page_bounds are shared with the server-side paged endpoint.
"""

import math
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from jobportal.schemas.job_listing import DEFAULT_PAGE_SIZE, PAGE_SIZES, SortDirection, SortKey


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for total rows: ceil(total / page_size)."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(total / page_size)


def page_bounds(page: int, page_size: int) -> Tuple[int, int]:
    """Slice bounds (start, stop) of a 1-based page."""
    start = (page - 1) * page_size
    return start, start + page_size


def validate_page_size(page_size: int) -> int:
    if page_size not in PAGE_SIZES:
        raise ValueError(f"page_size must be one of {', '.join(str(s) for s in PAGE_SIZES)}")
    return page_size


DATE_KEYS = (SortKey.CREATED_AT, SortKey.POST_DATE, SortKey.LAST_DATE)


def _field(job: Any, key: str):
    if isinstance(job, dict):
        return job.get(key)
    return getattr(job, key, None)


def _parse_date_value(key: SortKey, value: str):
    # datetime.fromisoformat only accepts a trailing Z from Python 3.11
    if key == SortKey.CREATED_AT:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    return date.fromisoformat(value)


def sort_jobs(jobs: Iterable[Any], key: SortKey, direction: SortDirection) -> List[Any]:
    """
    Sort jobs by a single column.

    Rows may be response models or the plain dicts decoded from the API
    JSON; ISO strings in the date columns are parsed before comparing.
    Missing values go first ascending and last descending. Python's sort is
    stable for reverse=True too, so rows with equal keys keep their input
    order in both directions.
    """
    def sort_value(job):
        value = _field(job, key.value)
        if value is None:
            return (False, 0)
        if key in DATE_KEYS and isinstance(value, str):
            value = _parse_date_value(key, value)
        return (True, value)

    return sorted(jobs, key=sort_value, reverse=direction == SortDirection.DESC)


class ListView:
    """Sort and pagination state for one listing table."""

    def __init__(self, jobs: Optional[Sequence[Any]] = None):
        self.jobs: List[Any] = list(jobs or [])
        self.sort_key = SortKey.CREATED_AT
        self.direction = SortDirection.DESC
        self.page_size = DEFAULT_PAGE_SIZE
        self.page = 1

    def set_jobs(self, jobs: Sequence[Any]) -> None:
        self.jobs = list(jobs)
        self.page = min(self.page, max(self.total_pages, 1))

    def remove_job(self, job_id: int) -> None:
        """Drop a deleted row without refetching the list."""
        self.set_jobs([job for job in self.jobs if _field(job, "id") != job_id])

    def sort_by(self, key) -> None:
        """
        Select a sort column.

        Selecting the active column toggles the direction, any other column
        starts ascending.
        """
        key = SortKey(key)
        if key == self.sort_key and self.direction == SortDirection.ASC:
            self.direction = SortDirection.DESC
        else:
            self.direction = SortDirection.ASC
        self.sort_key = key

    def set_page_size(self, page_size: int) -> None:
        self.page_size = validate_page_size(page_size)
        self.page = 1

    @property
    def total_pages(self) -> int:
        return page_count(len(self.jobs), self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def next_page(self) -> int:
        if self.has_next:
            self.page += 1
        return self.page

    def previous_page(self) -> int:
        if self.has_previous:
            self.page -= 1
        return self.page

    def go_to(self, page: int) -> int:
        self.page = min(max(page, 1), max(self.total_pages, 1))
        return self.page

    def sorted_jobs(self) -> List[Any]:
        return sort_jobs(self.jobs, self.sort_key, self.direction)

    def displayed(self) -> List[Any]:
        """Rows of the current page, in sort order."""
        start, stop = page_bounds(self.page, self.page_size)
        return self.sorted_jobs()[start:stop]

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, func
from jobportal.core.database import Base


class JobListing(Base):
    """
    A single job posting on the board.

    Every column except id and created_at is nullable: the admin form marks
    post_date, organisation, job_details and last_date as required, but the
    API stores whatever was submitted.
    """
    __tablename__ = "job_listings"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    post_date = Column(Date, nullable=True)
    organisation = Column(String, nullable=True)
    job_details = Column(Text, nullable=True)
    vacancies = Column(Integer, nullable=True)
    location = Column(String, nullable=True)
    qualification = Column(String, nullable=True)
    last_date = Column(Date, nullable=True)
    salary = Column(String, nullable=True)

    # Public URL returned by the storage backend
    picture = Column(String, nullable=True)

    more_details = Column(Text, nullable=True)
    notification_link = Column(String, nullable=True)
    apply_link = Column(String, nullable=True)

    def __repr__(self):
        return f"<JobListing(id={self.id}, organisation='{self.organisation}')>"

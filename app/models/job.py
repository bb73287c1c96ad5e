"""Pydantic models for the ``job_postings`` table.

``JobPostingPayload`` carries the admin job form rules: title of at least
three characters, non-empty department / type / location, non-negative
salaries with ``salary_min <= salary_max``, and description /
requirements of at least ten non-blank characters.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.constants import JOB_TEXT_MIN_LENGTH, JOB_TITLE_MIN_LENGTH
from app.models.enums import JobStatus


class JobPostingPayload(BaseModel):
    """Payload for creating or replacing a job posting."""
    title: str = Field(min_length=JOB_TITLE_MIN_LENGTH)
    department: str = Field(min_length=1)
    type: str = Field(min_length=1)
    location: str = Field(min_length=1)
    office_location: str | None = None
    salary_min: float = Field(ge=0)
    salary_max: float = Field(ge=0)
    description: str
    requirements: str
    deadline: date
    status: JobStatus = JobStatus.active

    @field_validator("description", "requirements")
    @classmethod
    def _long_enough(cls, value: str) -> str:
        stripped = value.strip()
        if len(stripped) < JOB_TEXT_MIN_LENGTH:
            raise ValueError(
                f"must be at least {JOB_TEXT_MIN_LENGTH} non-blank characters"
            )
        return stripped

    @model_validator(mode="after")
    def _salary_range(self) -> "JobPostingPayload":
        if self.salary_min > self.salary_max:
            raise ValueError("salary_min must not exceed salary_max")
        return self


class JobPosting(BaseModel):
    """Full job posting record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    department: str
    type: str | None = None
    location: str | None = None
    office_location: str | None = None
    salary_min: float | None = None
    salary_max: float | None = None
    description: str | None = None
    requirements: str | None = None
    deadline: date | None = None
    status: JobStatus = JobStatus.active
    applications_count: int | None = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class JobStats(BaseModel):
    """Counters shown above the job management table."""
    total_jobs: int = 0
    active_jobs: int = 0
    inactive_jobs: int = 0
    total_applications: int = 0


class ApplicationResponse(BaseModel):
    """Result of applying to / withdrawing from a job."""
    cv_id: UUID
    job_id: UUID
    status: str

"""Pydantic models for the ``cvs`` table.

``CVForm`` mirrors the applicant CV form: experience is free text
("5 years in backend") and skills / languages are comma-separated.  The
service layer turns it into a row payload.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import CVStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CVForm(BaseModel):
    """Applicant submission / edit payload."""
    full_name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: str = Field(min_length=1)
    address: str | None = None
    linkedin_profile: str | None = None
    github_profile: str | None = None
    portfolio_link: str | None = None
    current_job_title: str | None = None
    experience: str = Field(min_length=1)
    education: str = Field(min_length=1)
    certifications: str | None = None
    references: str | None = None
    skills: str = Field(min_length=1)
    languages_known: str | None = None
    desired_salary: str | None = None
    willingness_to_relocate: bool = False
    availability_for_remote_work: bool = False
    industry_experience: str | None = None
    career_goals: str | None = None


class CVStatusUpdate(BaseModel):
    """Admin decision on a CV."""
    status: CVStatus


class CVReviewUpdate(BaseModel):
    """Admin review fields; omitted fields are left untouched."""
    rating: int | None = Field(default=None, ge=1, le=5)
    requirements_match: float | None = Field(default=None, ge=0, le=100)
    pipeline_status: str | None = None


class CV(BaseModel):
    """Full CV record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None = None
    applicant_name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    linkedin_profile: str | None = None
    github_profile: str | None = None
    portfolio_link: str | None = None
    current_job_title: str | None = None
    years_experience: int = 0
    education: str | None = None
    certifications: str | None = None
    references: str | None = None
    skills: list[str] = []
    languages_known: list[str] = []
    desired_salary: str | None = None
    willingness_to_relocate: bool | None = None
    availability_for_remote_work: bool | None = None
    industry_experience: str | None = None
    career_goals: str | None = None
    avatar_url: str | None = None
    status: CVStatus | None = CVStatus.pending
    pipeline_status: str | None = None
    requirements_match: float | None = None
    rating: float | None = None
    theme: str | None = None
    job_id: UUID | None = None
    application_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("skills", "languages_known", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        # Postgres text[] columns come back as null when never set
        return [] if value is None else value


class CVBrief(BaseModel):
    """Compact CV projection used in dashboard lists."""
    id: UUID
    applicant_name: str
    current_job_title: str | None = None
    years_experience: int = 0
    skills: list[str] = []
    status: CVStatus | None = None
    avatar_url: str | None = None
    rating: float | None = None
    requirements_match: float | None = None
    application_date: datetime | None = None

    @classmethod
    def from_cv(cls, cv: CV) -> "CVBrief":
        return cls.model_validate(cv.model_dump(include=set(cls.model_fields)))


class AvatarUploadResponse(BaseModel):
    """Response for a stored avatar image."""
    cv_id: UUID
    avatar_url: str

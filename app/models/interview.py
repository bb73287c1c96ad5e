"""Pydantic models for the ``interviews`` table."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.models.enums import InterviewStatus


class InterviewSchedule(BaseModel):
    """Payload for scheduling or moving an interview."""
    scheduled_at: datetime


class InterviewUpdate(BaseModel):
    """Partial update of an interview; omitted fields are left untouched."""
    status: InterviewStatus | None = None
    feedback: str | None = None


class Interview(BaseModel):
    """Interview record, optionally joined with the applicant name."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    cv_id: UUID | None = None
    recruiter_id: UUID | None = None
    scheduled_at: datetime
    status: InterviewStatus | None = InterviewStatus.scheduled
    feedback: str | None = None
    applicant_name: str | None = None  # from the cvs(applicant_name) embed
    created_at: datetime | None = None
    updated_at: datetime | None = None

"""Pydantic models for the single-row ``settings`` table."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import SortCriteria, SortOrder


class CompanySettingsUpdate(BaseModel):
    """Payload for saving company settings."""
    company_name: str = Field(min_length=1)
    recruiter_name: str | None = None
    recruiter_avatar_url: str | None = None
    default_sort_criteria: SortCriteria = SortCriteria.experience
    default_sort_order: SortOrder = SortOrder.desc


class CompanySettings(BaseModel):
    """Company settings record; ``id`` is None until the row is first saved."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    company_name: str = ""
    recruiter_name: str | None = None
    recruiter_avatar_url: str | None = None
    default_sort_criteria: SortCriteria | None = SortCriteria.experience
    default_sort_order: SortOrder | None = SortOrder.desc
    created_at: datetime | None = None
    updated_at: datetime | None = None

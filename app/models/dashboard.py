"""Response models for dashboard and sorting endpoints.

These are API-layer response schemas derived from fetched rows, not direct
table mappings.
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.constants import MAX_EXPERIENCE_DEFAULT, MIN_EXPERIENCE_DEFAULT
from app.models.cv import CV, CVBrief
from app.models.enums import SortCriteria, SortOrder
from app.models.interview import Interview


# --- Summary cards ---

class DashboardSummary(BaseModel):
    """Counts and averages shown on the admin summary cards."""
    total_applications: int = 0
    pending_applications: int = 0
    accepted_applications: int = 0
    rejected_applications: int = 0
    average_experience: float = 0.0
    average_match: float = 0.0
    open_positions: int = 0
    pipeline: dict[str, int] = {}


# --- Application trends ---

class TrendPoint(BaseModel):
    """Applications received on a single calendar day."""
    day: date
    label: str
    applications: int = 0


class TrendResponse(BaseModel):
    points: list[TrendPoint] = []


# --- Experience clusters ---

class ExperienceGroup(BaseModel):
    """CVs whose years of experience fall into one bucket."""
    range: str
    lower_bound: int
    count: int = 0
    applicants: list[CVBrief] = []


class ClustersResponse(BaseModel):
    groups: list[ExperienceGroup] = []


# --- Ranking ---

class ScoredCV(BaseModel):
    """A CV with its weighted performance score."""
    cv: CVBrief
    performance_score: float
    has_certifications: bool = False


class TopPerformersResponse(BaseModel):
    performers: list[ScoredCV] = []


class RankedCV(BaseModel):
    """Position of a CV when ordered by requirements match."""
    rank: int
    cv_id: UUID
    applicant_name: str
    requirements_match: float = 0.0


class RankingResponse(BaseModel):
    ranking: list[RankedCV] = []


# --- Sorting page ---

class CVFilter(BaseModel):
    """Filters applied on the sorting page.  ``status="all"`` disables the status filter."""
    status: str = "all"
    search: str | None = None
    skills: list[str] = []
    min_experience: int = Field(default=MIN_EXPERIENCE_DEFAULT, ge=0)
    max_experience: int = Field(default=MAX_EXPERIENCE_DEFAULT, ge=0)


class SortedCVsResponse(BaseModel):
    """Full response for GET /api/v1/cvs/sorted."""
    cvs: list[CV] = []
    total: int = 0
    filtered_from: int = 0
    criteria: SortCriteria = SortCriteria.experience
    order: SortOrder = SortOrder.desc
    available_skills: list[str] = []


# --- Messages / interviews screen ---

class CandidatesByStatus(BaseModel):
    """Accepted and rejected CVs, the two lists on the messages screen."""
    accepted: list[CV] = []
    rejected: list[CV] = []


# --- Full dashboard ---

class DashboardResponse(BaseModel):
    """Full response for GET /api/v1/dashboard."""
    summary: DashboardSummary = DashboardSummary()
    trends: list[TrendPoint] = []
    recent_applications: list[CVBrief] = []
    top_performers: list[ScoredCV] = []
    experience_groups: list[ExperienceGroup] = []
    upcoming_interviews: list[Interview] = []

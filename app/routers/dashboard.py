"""Admin dashboard endpoints.

Each GET recomputes its figures from freshly fetched rows; nothing is
cached between requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from app.core.auth import require_admin
from app.core.constants import (
    RECENT_APPLICATIONS_LIMIT,
    TOP_PERFORMERS_LIMIT,
    TREND_DAYS,
)
from app.models.cv import CVBrief
from app.models.dashboard import (
    CandidatesByStatus,
    ClustersResponse,
    DashboardResponse,
    RankingResponse,
    TopPerformersResponse,
    TrendResponse,
)
from app.services.cvs import list_cvs
from app.services.dashboard import (
    application_trends,
    cvs_by_status,
    get_dashboard,
    recent_applications,
)
from app.services.ranking import experience_groups, rank_by_match, top_performers

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=DashboardResponse)
async def dashboard() -> DashboardResponse:
    """Everything the admin dashboard renders, in one response."""
    return get_dashboard()


@router.get("/trends", response_model=TrendResponse)
async def dashboard_trends(
    days: int = Query(default=TREND_DAYS, ge=1, le=365),
) -> TrendResponse:
    """Daily application counts, oldest day first."""
    return TrendResponse(points=application_trends(list_cvs(), days=days))


@router.get("/recent", response_model=list[CVBrief])
async def dashboard_recent(
    limit: int = Query(default=RECENT_APPLICATIONS_LIMIT, ge=1, le=50),
) -> list[CVBrief]:
    return recent_applications(list_cvs(), limit=limit)


@router.get("/top-performers", response_model=TopPerformersResponse)
async def dashboard_top_performers(
    limit: int = Query(default=TOP_PERFORMERS_LIMIT, ge=1, le=50),
) -> TopPerformersResponse:
    return TopPerformersResponse(performers=top_performers(list_cvs(), limit=limit))


@router.get("/ranking", response_model=RankingResponse)
async def dashboard_ranking() -> RankingResponse:
    """All CVs ranked by requirements match."""
    return RankingResponse(ranking=rank_by_match(list_cvs()))


@router.get("/clusters", response_model=ClustersResponse)
async def dashboard_clusters() -> ClustersResponse:
    return ClustersResponse(groups=experience_groups(list_cvs()))


@router.get("/candidates", response_model=CandidatesByStatus)
async def dashboard_candidates() -> CandidatesByStatus:
    """Accepted and rejected CVs for the messages and interviews screen."""
    return cvs_by_status(list_cvs())

"""Dashboard aggregation service.

Fetches CVs, job postings and interviews wholesale and derives every
dashboard figure in Python.  The pure helpers accept plain lists so they
can be reused by the sorting and messages screens.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from app.core.constants import (
    DEFAULT_PIPELINE_STATUS,
    RECENT_APPLICATIONS_LIMIT,
    TREND_DAYS,
    UPCOMING_INTERVIEWS_LIMIT,
)
from app.models.cv import CV, CVBrief
from app.models.dashboard import (
    CandidatesByStatus,
    DashboardResponse,
    DashboardSummary,
    TrendPoint,
)
from app.models.enums import CVStatus, InterviewStatus, JobStatus
from app.models.interview import Interview
from app.models.job import JobPosting
from app.services.cvs import list_cvs
from app.services.interviews import list_interviews
from app.services.jobs import list_jobs
from app.services.ranking import application_timestamp, experience_groups, top_performers

logger = logging.getLogger(__name__)


def summarize(cvs: list[CV], jobs: Iterable[JobPosting] = ()) -> DashboardSummary:
    """Summary card figures.  An empty CV list yields zeros."""
    total = len(cvs)
    status_counts = Counter(cv.status for cv in cvs)
    pipeline = Counter(cv.pipeline_status or DEFAULT_PIPELINE_STATUS for cv in cvs)

    average_experience = (
        sum(cv.years_experience for cv in cvs) / total if total else 0.0
    )
    average_match = (
        sum(cv.requirements_match or 0 for cv in cvs) / total if total else 0.0
    )

    return DashboardSummary(
        total_applications=total,
        pending_applications=status_counts[CVStatus.pending],
        accepted_applications=status_counts[CVStatus.accepted],
        rejected_applications=status_counts[CVStatus.rejected],
        average_experience=round(average_experience, 2),
        average_match=round(average_match, 2),
        open_positions=sum(1 for job in jobs if job.status == JobStatus.active),
        pipeline=dict(pipeline),
    )


def application_trends(
    cvs: Iterable[CV],
    days: int = TREND_DAYS,
    today: date | None = None,
) -> list[TrendPoint]:
    """Daily application counts for the last *days* days, oldest first.

    Only ``application_date`` counts; CVs without one are left out.
    Days are UTC calendar days.
    """
    today = today or datetime.now(timezone.utc).date()

    per_day: Counter[date] = Counter()
    for cv in cvs:
        if cv.application_date is None:
            continue
        stamp = cv.application_date
        if stamp.tzinfo:
            stamp = stamp.astimezone(timezone.utc)
        per_day[stamp.date()] += 1

    points: list[TrendPoint] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        points.append(
            TrendPoint(
                day=day,
                label=day.strftime("%b %d"),
                applications=per_day[day],
            )
        )
    return points


def recent_applications(
    cvs: Iterable[CV],
    limit: int = RECENT_APPLICATIONS_LIMIT,
) -> list[CVBrief]:
    """Most recently submitted CVs, newest first."""
    ordered = sorted(cvs, key=application_timestamp, reverse=True)
    return [CVBrief.from_cv(cv) for cv in ordered[:limit]]


def upcoming_interviews(
    interviews: Iterable[Interview],
    limit: int = UPCOMING_INTERVIEWS_LIMIT,
) -> list[Interview]:
    """Next scheduled interviews, soonest first."""
    scheduled = [i for i in interviews if i.status == InterviewStatus.scheduled]
    scheduled.sort(key=lambda i: i.scheduled_at)
    return scheduled[:limit]


def cvs_by_status(cvs: Iterable[CV]) -> CandidatesByStatus:
    """Split CVs into the accepted and rejected lists."""
    accepted: list[CV] = []
    rejected: list[CV] = []
    for cv in cvs:
        if cv.status == CVStatus.accepted:
            accepted.append(cv)
        elif cv.status == CVStatus.rejected:
            rejected.append(cv)
    return CandidatesByStatus(accepted=accepted, rejected=rejected)


def get_dashboard() -> DashboardResponse:
    """Fetch all rows the admin dashboard needs and compose the response."""
    cvs = list_cvs()
    jobs = list_jobs()
    interviews = list_interviews()

    logger.info(
        "dashboard_built",
        extra={
            "cvs": len(cvs),
            "jobs": len(jobs),
            "interviews": len(interviews),
        },
    )

    return DashboardResponse(
        summary=summarize(cvs, jobs),
        trends=application_trends(cvs),
        recent_applications=recent_applications(cvs),
        top_performers=top_performers(cvs),
        experience_groups=experience_groups(cvs),
        upcoming_interviews=upcoming_interviews(interviews),
    )

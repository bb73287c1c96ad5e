"""CV scoring, ranking, filtering and sorting.

Pure functions over lists of ``CV`` models; nothing here talks to the
database.  Inputs are never mutated and all sorts are stable, so CVs with
equal keys keep the order the database returned them in.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from app.core.constants import (
    CERTIFICATION_BONUS,
    EXPERIENCE_BUCKET_WIDTH,
    EXPERIENCE_WEIGHT,
    REFERENCES_BONUS,
    SKILL_WEIGHT,
    TOP_PERFORMERS_LIMIT,
)
from app.models.cv import CV, CVBrief
from app.models.dashboard import CVFilter, ExperienceGroup, RankedCV, ScoredCV
from app.models.enums import SortCriteria, SortOrder

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def performance_score(cv: CV) -> float:
    """Weighted sum of skills, experience, match and profile bonuses."""
    score = (
        len(cv.skills) * SKILL_WEIGHT
        + cv.years_experience * EXPERIENCE_WEIGHT
        + (cv.requirements_match or 0)
    )
    if cv.certifications:
        score += CERTIFICATION_BONUS
    if cv.references:
        score += REFERENCES_BONUS
    return score


def top_performers(cvs: Iterable[CV], limit: int = TOP_PERFORMERS_LIMIT) -> list[ScoredCV]:
    """Return the *limit* highest-scoring CVs, best first."""
    scored = [
        ScoredCV(
            cv=CVBrief.from_cv(cv),
            performance_score=performance_score(cv),
            has_certifications=bool(cv.certifications),
        )
        for cv in cvs
    ]
    scored.sort(key=lambda s: s.performance_score, reverse=True)
    return scored[:limit]


def rank_by_match(cvs: Iterable[CV]) -> list[RankedCV]:
    """Rank CVs by requirements match, 1-based, missing match counted as 0."""
    ordered = sorted(cvs, key=lambda cv: cv.requirements_match or 0, reverse=True)
    return [
        RankedCV(
            rank=idx,
            cv_id=cv.id,
            applicant_name=cv.applicant_name,
            requirements_match=cv.requirements_match or 0,
        )
        for idx, cv in enumerate(ordered, start=1)
    ]


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def collect_skills(cvs: Iterable[CV]) -> list[str]:
    """Sorted list of every distinct skill across *cvs*."""
    return sorted({skill for cv in cvs for skill in cv.skills})


def _matches(cv: CV, filters: CVFilter) -> bool:
    if filters.status != "all":
        cv_status = cv.status.value if cv.status else None
        if cv_status != filters.status:
            return False

    if filters.search:
        needle = filters.search.lower()
        in_name = needle in cv.applicant_name.lower()
        in_title = needle in (cv.current_job_title or "").lower()
        if not (in_name or in_title):
            return False

    # AND logic: every selected skill must be present
    if filters.skills and not all(skill in cv.skills for skill in filters.skills):
        return False

    return filters.min_experience <= cv.years_experience <= filters.max_experience


def filter_cvs(cvs: Iterable[CV], filters: CVFilter) -> list[CV]:
    """Return the CVs that pass every active filter."""
    return [cv for cv in cvs if _matches(cv, filters)]


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def application_timestamp(cv: CV) -> datetime:
    """Application date, falling back to creation time, then the epoch."""
    stamp = cv.application_date or cv.created_at
    return _as_utc(stamp) if stamp else _EPOCH


_SORT_KEYS = {
    SortCriteria.experience: lambda cv: cv.years_experience,
    SortCriteria.skills: lambda cv: len(cv.skills),
    SortCriteria.rating: lambda cv: cv.rating or 0,
    SortCriteria.name: lambda cv: cv.applicant_name.casefold(),
    SortCriteria.date: application_timestamp,
}


def sort_cvs(
    cvs: Iterable[CV],
    criteria: SortCriteria = SortCriteria.experience,
    order: SortOrder = SortOrder.desc,
) -> list[CV]:
    """Return *cvs* sorted by *criteria* in *order*."""
    return sorted(
        cvs,
        key=_SORT_KEYS[criteria],
        reverse=order == SortOrder.desc,
    )


# ---------------------------------------------------------------------------
# Clustering
# ---------------------------------------------------------------------------

def experience_groups(
    cvs: Iterable[CV],
    width: int = EXPERIENCE_BUCKET_WIDTH,
) -> list[ExperienceGroup]:
    """Bucket CVs into fixed-width experience ranges, lowest range first."""
    buckets: dict[int, list[CV]] = {}
    for cv in cvs:
        lower = (cv.years_experience // width) * width
        buckets.setdefault(lower, []).append(cv)

    return [
        ExperienceGroup(
            range=f"{lower}-{lower + width} years",
            lower_bound=lower,
            count=len(members),
            applicants=[CVBrief.from_cv(cv) for cv in members],
        )
        for lower, members in sorted(buckets.items())
    ]

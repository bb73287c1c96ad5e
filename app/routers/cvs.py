"""Admin CV endpoints.

Listing, the sorting page, status decisions, review fields, interview
scheduling and messaging for a single CV.  Every route requires an admin
session.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.auth import require_admin
from app.core.constants import MAX_EXPERIENCE_DEFAULT, MIN_EXPERIENCE_DEFAULT
from app.core.errors import ConaError
from app.models.cv import CV, CVReviewUpdate, CVStatusUpdate
from app.models.dashboard import CVFilter, SortedCVsResponse
from app.models.enums import SortCriteria, SortOrder
from app.models.interview import Interview, InterviewSchedule
from app.models.message import Message, MessageCreate
from app.services.company_settings import get_company_settings
from app.services.cvs import get_cv, list_cvs, update_cv_review, update_cv_status
from app.services.interviews import list_interviews_for_cv, schedule_interview
from app.services.messages import list_messages, send_message
from app.services.ranking import collect_skills, filter_cvs, sort_cvs

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[CV])
async def get_all_cvs(
    order_by: str = Query(
        default="requirements_match",
        pattern="^(requirements_match|application_date|created_at|years_experience|applicant_name)$",
        description="Column to order by",
    ),
    order: SortOrder = Query(default=SortOrder.desc),
) -> list[CV]:
    """Return every CV, best requirements match first by default."""
    return list_cvs(order_by=order_by, ascending=order == SortOrder.asc)


@router.get("/sorted", response_model=SortedCVsResponse)
async def get_sorted_cvs(
    status: str = Query(
        default="all",
        pattern="^(all|pending|accepted|rejected)$",
    ),
    search: str | None = Query(default=None, description="Name or job title substring"),
    skills: list[str] = Query(default=[], description="Required skills (AND)"),
    min_experience: int = Query(default=MIN_EXPERIENCE_DEFAULT, ge=0),
    max_experience: int = Query(default=MAX_EXPERIENCE_DEFAULT, ge=0),
    criteria: SortCriteria | None = Query(default=None),
    order: SortOrder | None = Query(default=None),
) -> SortedCVsResponse:
    """Filter and sort CVs for the sorting page.

    ``criteria`` / ``order`` fall back to the company's default sort
    settings when omitted.
    """
    if criteria is None or order is None:
        defaults = get_company_settings()
        criteria = criteria or defaults.default_sort_criteria or SortCriteria.experience
        order = order or defaults.default_sort_order or SortOrder.desc

    all_cvs = list_cvs()
    filters = CVFilter(
        status=status,
        search=search,
        skills=skills,
        min_experience=min_experience,
        max_experience=max_experience,
    )
    matched = sort_cvs(filter_cvs(all_cvs, filters), criteria, order)

    return SortedCVsResponse(
        cvs=matched,
        total=len(matched),
        filtered_from=len(all_cvs),
        criteria=criteria,
        order=order,
        available_skills=collect_skills(all_cvs),
    )


@router.get("/{cv_id}", response_model=CV)
async def get_single_cv(cv_id: UUID) -> CV:
    return get_cv(cv_id)


@router.patch("/{cv_id}/status", response_model=CV)
async def set_cv_status(cv_id: UUID, body: CVStatusUpdate) -> CV:
    """Accept, reject, or return a CV to pending."""
    try:
        return update_cv_status(cv_id, body.status)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "set_cv_status_failed",
            extra={"cv_id": str(cv_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update CV status: {exc}",
        ) from exc


@router.patch("/{cv_id}/review", response_model=CV)
async def set_cv_review(cv_id: UUID, body: CVReviewUpdate) -> CV:
    """Update rating, requirements match and pipeline tag."""
    try:
        return update_cv_review(cv_id, body)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "set_cv_review_failed",
            extra={"cv_id": str(cv_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update CV review: {exc}",
        ) from exc


# ---------------------------------------------------------------------------
# Interviews for a CV
# ---------------------------------------------------------------------------

@router.get("/{cv_id}/interviews", response_model=list[Interview])
async def get_cv_interviews(cv_id: UUID) -> list[Interview]:
    return list_interviews_for_cv(cv_id)


@router.put("/{cv_id}/interview", response_model=Interview)
async def put_cv_interview(cv_id: UUID, body: InterviewSchedule) -> Interview:
    """Schedule the CV's interview, or move it if one exists."""
    try:
        return schedule_interview(cv_id, body.scheduled_at)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "schedule_interview_failed",
            extra={"cv_id": str(cv_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to schedule interview: {exc}",
        ) from exc


# ---------------------------------------------------------------------------
# Messages for a CV
# ---------------------------------------------------------------------------

@router.get("/{cv_id}/messages", response_model=list[Message])
async def get_cv_messages(cv_id: UUID) -> list[Message]:
    return list_messages(cv_id)


@router.post("/{cv_id}/messages", response_model=Message, status_code=201)
async def post_cv_message(cv_id: UUID, body: MessageCreate) -> Message:
    try:
        return send_message(cv_id, body.message)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "send_message_failed",
            extra={"cv_id": str(cv_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to send message: {exc}",
        ) from exc

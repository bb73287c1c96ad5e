"""Admin interview endpoints: the full list, the upcoming list, updates."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.auth import require_admin
from app.core.constants import UPCOMING_INTERVIEWS_LIMIT
from app.core.errors import ConaError
from app.models.interview import Interview, InterviewUpdate
from app.services.dashboard import upcoming_interviews
from app.services.interviews import list_interviews, update_interview

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[Interview])
async def get_interviews() -> list[Interview]:
    return list_interviews()


@router.get("/upcoming", response_model=list[Interview])
async def get_upcoming_interviews(
    limit: int = Query(default=UPCOMING_INTERVIEWS_LIMIT, ge=1, le=50),
) -> list[Interview]:
    """Next scheduled interviews, soonest first."""
    return upcoming_interviews(list_interviews(), limit=limit)


@router.patch("/{interview_id}", response_model=Interview)
async def patch_interview(interview_id: UUID, body: InterviewUpdate) -> Interview:
    """Record an outcome (confirmed / declined) or feedback."""
    try:
        return update_interview(interview_id, body)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "update_interview_failed",
            extra={"interview_id": str(interview_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update interview: {exc}",
        ) from exc

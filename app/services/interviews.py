"""Interview scheduling service.

At most one interview per CV is kept by convention: scheduling for a CV
that already has one moves the existing row instead of inserting.  No
uniqueness constraint backs this, so pre-existing duplicates are left as
they are and the first match is updated.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from app.core.errors import ConflictError, NotFoundError
from app.db.supabase import get_supabase
from app.models.enums import CVStatus, InterviewStatus
from app.models.interview import Interview, InterviewUpdate
from app.services.cvs import get_cv

logger = logging.getLogger(__name__)


def _to_interview(row: dict[str, Any]) -> Interview:
    embedded = row.get("cvs") or {}
    return Interview(**row, applicant_name=embedded.get("applicant_name"))


def list_interviews() -> list[Interview]:
    """Every interview with its applicant name, earliest first."""
    client = get_supabase()
    result = (
        client.table("interviews")
        .select("*, cvs(applicant_name)")
        .order("scheduled_at")
        .execute()
    )
    return [_to_interview(row) for row in result.data or []]


def list_interviews_for_cv(cv_id: UUID | str) -> list[Interview]:
    client = get_supabase()
    result = (
        client.table("interviews")
        .select("*")
        .eq("cv_id", str(cv_id))
        .order("scheduled_at")
        .execute()
    )
    return [_to_interview(row) for row in result.data or []]


def schedule_interview(cv_id: UUID | str, scheduled_at: datetime) -> Interview:
    """Create or move the interview for an accepted CV."""
    cv = get_cv(cv_id)
    if cv.status != CVStatus.accepted:
        raise ConflictError("Interviews can only be scheduled for accepted CVs")

    client = get_supabase()
    now = datetime.now(timezone.utc).isoformat()
    existing = (
        client.table("interviews")
        .select("id")
        .eq("cv_id", str(cv_id))
        .order("created_at")
        .limit(1)
        .execute()
    )

    if existing.data:
        interview_id = existing.data[0]["id"]
        result = (
            client.table("interviews")
            .update({"scheduled_at": scheduled_at.isoformat(), "updated_at": now})
            .eq("id", interview_id)
            .execute()
        )
        event = "interview_rescheduled"
    else:
        result = (
            client.table("interviews")
            .insert(
                {
                    "cv_id": str(cv_id),
                    "scheduled_at": scheduled_at.isoformat(),
                    "status": InterviewStatus.scheduled.value,
                }
            )
            .execute()
        )
        event = "interview_scheduled"

    if not result.data:
        raise RuntimeError("Interview write returned no row")

    interview = _to_interview(result.data[0])
    logger.info(
        event,
        extra={
            "cv_id": str(cv_id),
            "interview_id": str(interview.id),
            "scheduled_at": scheduled_at.isoformat(),
        },
    )
    return interview


def update_interview(interview_id: UUID | str, update: InterviewUpdate) -> Interview:
    """Record a status change and/or feedback on an interview."""
    update_data: dict[str, Any] = update.model_dump(mode="json", exclude_none=True)
    client = get_supabase()

    if not update_data:
        result = (
            client.table("interviews")
            .select("*")
            .eq("id", str(interview_id))
            .limit(1)
            .execute()
        )
    else:
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = (
            client.table("interviews")
            .update(update_data)
            .eq("id", str(interview_id))
            .execute()
        )

    if not result.data:
        raise NotFoundError(f"Interview not found: {interview_id}")

    logger.info(
        "interview_updated",
        extra={"interview_id": str(interview_id), "fields": sorted(update_data)},
    )
    return _to_interview(result.data[0])

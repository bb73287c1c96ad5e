"""Job posting service.

CRUD over ``job_postings`` plus the apply / withdraw flow.  The
``applications_count`` column is a stored counter moved by the
``increment_job_applications`` / ``decrement_job_applications`` RPCs, not
derived from ``cvs.job_id``; ``app.services.reconcile`` repairs drift.

Applying is a read-then-write: two concurrent requests for the same user
can both pass the "already applied" check.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from app.core.constants import RPC_DECREMENT_APPLICATIONS, RPC_INCREMENT_APPLICATIONS
from app.core.errors import ConflictError, NotFoundError
from app.db.supabase import call_rpc, get_supabase
from app.models.enums import JobStatus
from app.models.job import ApplicationResponse, JobPosting, JobPostingPayload, JobStats
from app.services.cvs import get_cv_for_user

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_jobs(active_only: bool = False) -> list[JobPosting]:
    """Return job postings, newest first; optionally only active ones."""
    client = get_supabase()
    query = client.table("job_postings").select("*")
    if active_only:
        query = query.eq("status", JobStatus.active.value)
    result = query.order("created_at", desc=True).execute()
    return [JobPosting(**row) for row in result.data or []]


def get_job(job_id: UUID | str) -> JobPosting:
    """Return a single job posting or raise ``NotFoundError``."""
    client = get_supabase()
    result = (
        client.table("job_postings")
        .select("*")
        .eq("id", str(job_id))
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError(f"Job posting not found: {job_id}")
    return JobPosting(**result.data[0])


def job_stats(jobs: list[JobPosting]) -> JobStats:
    """Totals shown on the job management cards."""
    active = sum(1 for job in jobs if job.status == JobStatus.active)
    return JobStats(
        total_jobs=len(jobs),
        active_jobs=active,
        inactive_jobs=len(jobs) - active,
        total_applications=sum(job.applications_count or 0 for job in jobs),
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def _payload_to_row(payload: JobPostingPayload) -> dict[str, Any]:
    row = payload.model_dump(mode="json")
    if payload.location == "remote":
        row["office_location"] = None
    return row


def create_job(payload: JobPostingPayload) -> JobPosting:
    """Insert a new posting with a zero application counter."""
    client = get_supabase()
    row = _payload_to_row(payload)
    row["applications_count"] = 0
    result = client.table("job_postings").insert(row).execute()
    if not result.data:
        raise RuntimeError("Job posting insert returned no row")

    job = JobPosting(**result.data[0])
    logger.info(
        "job_created",
        extra={"job_id": str(job.id), "title": job.title, "status": job.status.value},
    )
    return job


def update_job(job_id: UUID | str, payload: JobPostingPayload) -> JobPosting:
    """Replace the editable fields of a posting; the counter is left alone."""
    client = get_supabase()
    row = _payload_to_row(payload)
    row["updated_at"] = datetime.now(timezone.utc).isoformat()
    result = (
        client.table("job_postings")
        .update(row)
        .eq("id", str(job_id))
        .execute()
    )
    if not result.data:
        raise NotFoundError(f"Job posting not found: {job_id}")

    logger.info("job_updated", extra={"job_id": str(job_id)})
    return JobPosting(**result.data[0])


def delete_job(job_id: UUID | str) -> None:
    """Delete a posting; raises ``NotFoundError`` when nothing was removed."""
    client = get_supabase()
    result = client.table("job_postings").delete().eq("id", str(job_id)).execute()
    if not result.data:
        raise NotFoundError(f"Job posting not found: {job_id}")
    logger.info("job_deleted", extra={"job_id": str(job_id)})


# ---------------------------------------------------------------------------
# Applying
# ---------------------------------------------------------------------------

def apply_to_job(user_id: UUID, job_id: UUID) -> ApplicationResponse:
    """Attach the user's CV to *job_id* and bump the posting's counter.

    Raises ``ConflictError`` when the user has no CV, the posting is
    inactive, or the CV already references a job.
    """
    cv = get_cv_for_user(user_id)
    if cv is None:
        raise ConflictError("You need a CV to apply")

    job = get_job(job_id)
    if job.status != JobStatus.active:
        raise ConflictError("This job posting is no longer accepting applications")

    if cv.job_id is not None:
        raise ConflictError("You have already applied to a job")

    client = get_supabase()
    result = (
        client.table("cvs")
        .update({"job_id": str(job_id)})
        .eq("id", str(cv.id))
        .execute()
    )
    if not result.data:
        raise NotFoundError(f"CV not found: {cv.id}")
    call_rpc(RPC_INCREMENT_APPLICATIONS, {"job_id": str(job_id)})

    logger.info(
        "job_application_submitted",
        extra={"cv_id": str(cv.id), "job_id": str(job_id)},
    )
    return ApplicationResponse(cv_id=cv.id, job_id=job_id, status="applied")


def withdraw_application(user_id: UUID) -> ApplicationResponse:
    """Detach the user's CV from its job and decrement the counter."""
    cv = get_cv_for_user(user_id)
    if cv is None or cv.job_id is None:
        raise ConflictError("You have not applied to a job")

    job_id = cv.job_id
    client = get_supabase()
    result = client.table("cvs").update({"job_id": None}).eq("id", str(cv.id)).execute()
    if not result.data:
        raise NotFoundError(f"CV not found: {cv.id}")
    call_rpc(RPC_DECREMENT_APPLICATIONS, {"job_id": str(job_id)})

    logger.info(
        "job_application_withdrawn",
        extra={"cv_id": str(cv.id), "job_id": str(job_id)},
    )
    return ApplicationResponse(cv_id=cv.id, job_id=job_id, status="withdrawn")

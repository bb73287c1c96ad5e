"""Job posting endpoints.

Signed-in applicants list active postings and apply; admins manage the
postings and see inactive ones with ``include_inactive=true``.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.core.auth import check_admin, get_current_user, require_admin
from app.core.errors import ConaError
from app.models.auth import AuthUser
from app.models.job import ApplicationResponse, JobPosting, JobPostingPayload, JobStats
from app.services.jobs import (
    apply_to_job,
    create_job,
    delete_job,
    get_job,
    job_stats,
    list_jobs,
    update_job,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[JobPosting])
async def get_jobs(
    include_inactive: bool = Query(default=False, description="Admins only"),
    user: AuthUser = Depends(get_current_user),
) -> list[JobPosting]:
    """List job postings, newest first.  Only active ones unless an admin asks."""
    if include_inactive:
        check_admin(user)
    return list_jobs(active_only=not include_inactive)


@router.get("/stats", response_model=JobStats, dependencies=[Depends(require_admin)])
async def get_job_stats() -> JobStats:
    return job_stats(list_jobs())


@router.post(
    "",
    response_model=JobPosting,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def post_job(body: JobPostingPayload) -> JobPosting:
    try:
        return create_job(body)
    except ConaError:
        raise
    except Exception as exc:
        logger.error("create_job_failed", extra={"error_message": str(exc)})
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create job posting: {exc}",
        ) from exc


@router.get("/{job_id}", response_model=JobPosting)
async def get_single_job(
    job_id: UUID,
    user: AuthUser = Depends(get_current_user),
) -> JobPosting:
    return get_job(job_id)


@router.put("/{job_id}", response_model=JobPosting, dependencies=[Depends(require_admin)])
async def put_job(job_id: UUID, body: JobPostingPayload) -> JobPosting:
    try:
        return update_job(job_id, body)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "update_job_failed",
            extra={"job_id": str(job_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update job posting: {exc}",
        ) from exc


@router.delete("/{job_id}", status_code=204, dependencies=[Depends(require_admin)])
async def remove_job(job_id: UUID) -> Response:
    try:
        delete_job(job_id)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "delete_job_failed",
            extra={"job_id": str(job_id), "error_message": str(exc)},
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete job posting: {exc}",
        ) from exc
    return Response(status_code=204)


@router.post("/{job_id}/apply", response_model=ApplicationResponse, status_code=201)
async def post_application(
    job_id: UUID,
    user: AuthUser = Depends(get_current_user),
) -> ApplicationResponse:
    """Apply to a posting with the signed-in user's CV."""
    try:
        return apply_to_job(user.id, job_id)
    except ConaError:
        raise
    except Exception as exc:
        logger.error(
            "apply_failed",
            extra={
                "user_id": str(user.id),
                "job_id": str(job_id),
                "error_message": str(exc),
            },
        )
        raise HTTPException(
            status_code=500,
            detail=f"Failed to apply: {exc}",
        ) from exc

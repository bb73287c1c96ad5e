"""Applications-count reconcile service.

``job_postings.applications_count`` is moved by increment / decrement RPCs
when applicants apply or withdraw, so a failed RPC, a deleted CV or a
racing double-apply leaves it out of step with the CVs that actually
reference the job.  This run recounts ``cvs.job_id`` and writes the true
value wherever the stored counter disagrees.

Runs under ``app.scheduler.lock`` so scheduled and manual triggers never
overlap.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from uuid import UUID, uuid4

from app.db.supabase import get_supabase
from app.models.maintenance import CounterCorrection, ReconcileResult
from app.scheduler.lock import reconcile_lock

logger = logging.getLogger(__name__)


def _count_applications() -> Counter[str]:
    """Number of CVs referencing each job id."""
    client = get_supabase()
    result = client.table("cvs").select("job_id").execute()
    return Counter(
        str(row["job_id"]) for row in result.data or [] if row.get("job_id")
    )


def find_drift(
    jobs: list[dict],
    actual: Counter[str],
) -> list[CounterCorrection]:
    """Jobs whose stored counter differs from *actual*; null counts as 0."""
    corrections: list[CounterCorrection] = []
    for job in jobs:
        job_id = str(job["id"])
        stored = int(job.get("applications_count") or 0)
        real = actual.get(job_id, 0)
        if stored != real:
            corrections.append(
                CounterCorrection(job_id=UUID(job_id), stored_count=stored, actual_count=real)
            )
    return corrections


def reconcile_applications_count(
    trigger: str = "scheduler",
    run_id: UUID | None = None,
) -> ReconcileResult:
    """Recount applications per job and fix drifted counters.

    Returns a ``skipped`` result when another run holds the lock, and a
    ``failed`` result (never an exception) when the database errors.
    """
    run_id = run_id or uuid4()

    if not reconcile_lock.acquire(run_id):
        logger.warning(
            "reconcile_skipped",
            extra={"run_id": str(run_id), "trigger": trigger},
        )
        return ReconcileResult(run_id=run_id, status="skipped", trigger=trigger)

    start_time = time.time()
    logger.info("reconcile_start", extra={"run_id": str(run_id), "trigger": trigger})

    try:
        client = get_supabase()
        jobs_result = (
            client.table("job_postings")
            .select("id, applications_count")
            .execute()
        )
        jobs = jobs_result.data or []
        corrections = find_drift(jobs, _count_applications())

        for correction in corrections:
            client.table("job_postings").update(
                {"applications_count": correction.actual_count}
            ).eq("id", str(correction.job_id)).execute()
            logger.info(
                "applications_count_corrected",
                extra={
                    "job_id": str(correction.job_id),
                    "stored": correction.stored_count,
                    "actual": correction.actual_count,
                },
            )

        duration = round(time.time() - start_time, 2)
        logger.info(
            "reconcile_complete",
            extra={
                "run_id": str(run_id),
                "jobs_checked": len(jobs),
                "jobs_corrected": len(corrections),
                "duration_seconds": duration,
            },
        )
        return ReconcileResult(
            run_id=run_id,
            status="success",
            trigger=trigger,
            jobs_checked=len(jobs),
            jobs_corrected=len(corrections),
            corrections=corrections,
            duration_seconds=duration,
        )

    except Exception as exc:
        duration = round(time.time() - start_time, 2)
        logger.error(
            "reconcile_error",
            extra={"run_id": str(run_id), "error": str(exc)},
        )
        return ReconcileResult(
            run_id=run_id,
            status="failed",
            trigger=trigger,
            duration_seconds=duration,
            error=str(exc),
        )

    finally:
        reconcile_lock.release()

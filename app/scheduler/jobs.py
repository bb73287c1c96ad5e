"""APScheduler job definitions and scheduler management.

Runs the applications-count reconcile on an ``IntervalTrigger`` and
exposes start/shutdown/status helpers for the FastAPI lifespan.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.services.reconcile import reconcile_applications_count

logger = logging.getLogger(__name__)

# Module-level scheduler instance (singleton)
scheduler = BackgroundScheduler()

RECONCILE_JOB_ID = "applications_reconcile"


def _reconcile_job() -> None:
    """Wrapper that APScheduler calls on each interval tick."""
    reconcile_applications_count(trigger="scheduler")


def start_scheduler() -> None:
    """Register the reconcile job and start the background scheduler."""
    scheduler.add_job(
        _reconcile_job,
        IntervalTrigger(hours=settings.RECONCILE_INTERVAL_HOURS),
        id=RECONCILE_JOB_ID,
        replace_existing=True,
    )
    if not scheduler.running:
        scheduler.start()
    logger.info(
        "scheduler_started",
        extra={"interval_hours": settings.RECONCILE_INTERVAL_HOURS},
    )


def shutdown_scheduler() -> None:
    """Stop the scheduler without waiting for a running job."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")


def is_scheduler_running() -> bool:
    return scheduler.running

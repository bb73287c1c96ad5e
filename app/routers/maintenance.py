"""Maintenance trigger endpoints.

POST /reconcile starts the applications-count reconcile in a background
thread and returns 202, or 409 while a run is already in progress.
"""

from __future__ import annotations

import logging
import threading
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import require_admin
from app.scheduler.lock import reconcile_lock
from app.services.reconcile import reconcile_applications_count

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/reconcile", status_code=202)
async def trigger_reconcile() -> dict[str, Any]:
    """Recount applications per job posting in the background."""
    if reconcile_lock.held:
        current_run = reconcile_lock.run_id
        raise HTTPException(
            status_code=409,
            detail="Reconcile already in progress",
            headers={"X-Current-Run-Id": str(current_run) if current_run else "unknown"},
        )

    run_id = uuid4()

    def _run_reconcile() -> None:
        reconcile_applications_count(trigger="manual", run_id=run_id)

    thread = threading.Thread(target=_run_reconcile, daemon=True)
    thread.start()
    logger.info("reconcile_triggered", extra={"run_id": str(run_id)})

    return {
        "run_id": str(run_id),
        "status": "started",
        "message": "Applications count reconcile initiated",
    }

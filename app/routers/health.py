"""Liveness endpoint: database round trip plus scheduler state."""

import logging

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.db.supabase import get_supabase
from app.scheduler.jobs import is_scheduler_running

logger = logging.getLogger(__name__)

router = APIRouter()


def _database_reachable() -> bool:
    try:
        get_supabase().table("cvs").select("id").limit(1).execute()
    except Exception:
        logger.warning("health_db_probe_failed", exc_info=True)
        return False
    return True


@router.get("/health")
async def health_check() -> JSONResponse:
    """200 with ``{status, database, scheduler}``; 503 when the probe fails."""
    connected = _database_reachable()
    return JSONResponse(
        status_code=200 if connected else 503,
        content={
            "status": "ok" if connected else "degraded",
            "database": "connected" if connected else "disconnected",
            "scheduler": "running" if is_scheduler_running() else "stopped",
        },
    )

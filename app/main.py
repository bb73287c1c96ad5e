"""Cona Recruiting API application.

Wires logging, the scheduler lifecycle, CORS, the domain error handler
and every ``/api/v1`` router onto one FastAPI instance.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import ConaError, cona_error_handler
from app.core.logging import setup_logging
from app.routers import cvs, dashboard, health, interviews, jobs, maintenance, me
from app.routers import settings as settings_router
from app.scheduler.jobs import shutdown_scheduler, start_scheduler

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Run the reconcile scheduler for as long as the app is up."""
    setup_logging()
    start_scheduler()
    logger.info("app_started", extra={"cors_origins": ",".join(settings.cors_origins)})
    try:
        yield
    finally:
        shutdown_scheduler()
        logger.info("app_stopped")


app = FastAPI(
    title="Cona Recruiting API",
    description="CV intake, screening, interviews, messages and job postings",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(ConaError, cona_error_handler)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
for module, path, tag in (
    (cvs, "/cvs", "CVs"),
    (me, "/me", "Applicant"),
    (jobs, "/jobs", "Jobs"),
    (interviews, "/interviews", "Interviews"),
    (dashboard, "/dashboard", "Dashboard"),
    (settings_router, "/settings", "Settings"),
    (maintenance, "/maintenance", "Maintenance"),
):
    app.include_router(module.router, prefix=f"{API_PREFIX}{path}", tags=[tag])

"""Response models for the applications-count reconcile run."""

from uuid import UUID

from pydantic import BaseModel


class CounterCorrection(BaseModel):
    """A job whose stored ``applications_count`` drifted from the CV count."""
    job_id: UUID
    stored_count: int
    actual_count: int


class ReconcileResult(BaseModel):
    """Summary of a reconcile run (or a skip when one is already running)."""
    run_id: UUID | None = None
    status: str
    trigger: str = "manual"
    jobs_checked: int = 0
    jobs_corrected: int = 0
    corrections: list[CounterCorrection] = []
    duration_seconds: float = 0.0
    error: str | None = None

"""Unit tests for the applications-count reconcile and its scheduler.

Covers scheduler start/stop, the reconcile lock, drift detection and
correction, and the manual trigger endpoint.
"""

from __future__ import annotations

from collections import Counter
from unittest.mock import MagicMock, patch
from uuid import uuid4

from fastapi.testclient import TestClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

JOB_A = str(uuid4())
JOB_B = str(uuid4())
JOB_C = str(uuid4())


def _chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in ("select", "update", "eq", "limit", "order"):
        getattr(m, method).return_value = m
    m.count = None
    return m


def _mock_supabase_for_reconcile(
    jobs: list[dict], cvs: list[dict]
) -> tuple[MagicMock, MagicMock]:
    """Supabase mock whose job_postings / cvs tables return the given rows."""
    mock_sb = MagicMock()

    jobs_table = _chainable_table_mock()
    jobs_table.execute.return_value = MagicMock(data=jobs)
    cvs_table = _chainable_table_mock()
    cvs_table.execute.return_value = MagicMock(data=cvs)

    def table_dispatch(name: str) -> MagicMock:
        return jobs_table if name == "job_postings" else cvs_table

    mock_sb.table.side_effect = table_dispatch
    return mock_sb, jobs_table


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


class TestSchedulerInit:
    """APScheduler initializes and shuts down correctly."""

    @patch("app.scheduler.jobs.scheduler")
    def test_start_scheduler_adds_job(self, mock_scheduler: MagicMock) -> None:
        from app.scheduler.jobs import start_scheduler

        mock_scheduler.running = False
        start_scheduler()

        mock_scheduler.add_job.assert_called_once()
        call_kwargs = mock_scheduler.add_job.call_args
        assert call_kwargs.kwargs.get("id") == "applications_reconcile"
        assert call_kwargs.kwargs.get("replace_existing") is True
        mock_scheduler.start.assert_called_once()

    @patch("app.scheduler.jobs.scheduler")
    def test_start_when_running_does_not_restart(self, mock_scheduler: MagicMock) -> None:
        from app.scheduler.jobs import start_scheduler

        mock_scheduler.running = True
        start_scheduler()

        mock_scheduler.start.assert_not_called()

    @patch("app.scheduler.jobs.scheduler")
    def test_shutdown_scheduler(self, mock_scheduler: MagicMock) -> None:
        from app.scheduler.jobs import shutdown_scheduler

        mock_scheduler.running = True
        shutdown_scheduler()

        mock_scheduler.shutdown.assert_called_once_with(wait=False)

    @patch("app.scheduler.jobs.scheduler")
    def test_shutdown_not_running_noop(self, mock_scheduler: MagicMock) -> None:
        from app.scheduler.jobs import shutdown_scheduler

        mock_scheduler.running = False
        shutdown_scheduler()

        mock_scheduler.shutdown.assert_not_called()

    @patch("app.scheduler.jobs.reconcile_applications_count")
    def test_job_runs_with_scheduler_trigger(self, mock_reconcile: MagicMock) -> None:
        from app.scheduler.jobs import _reconcile_job

        _reconcile_job()

        mock_reconcile.assert_called_once_with(trigger="scheduler")


# ---------------------------------------------------------------------------
# Lock
# ---------------------------------------------------------------------------


class TestRunLock:
    """RunLock prevents concurrent reconcile runs."""

    def test_acquire_and_release(self) -> None:
        from app.scheduler.lock import RunLock

        lock = RunLock()
        run_id = uuid4()

        assert lock.acquire(run_id) is True
        assert lock.held is True
        assert lock.run_id == run_id

        lock.release()
        assert lock.held is False
        assert lock.run_id is None

    def test_second_acquire_fails(self) -> None:
        from app.scheduler.lock import RunLock

        lock = RunLock()
        first = uuid4()

        assert lock.acquire(first) is True
        assert lock.acquire(uuid4()) is False
        assert lock.run_id == first

    def test_release_idempotent(self) -> None:
        from app.scheduler.lock import RunLock

        lock = RunLock()
        # Should not raise
        lock.release()
        lock.release()
        assert lock.held is False


# ---------------------------------------------------------------------------
# Drift detection and correction
# ---------------------------------------------------------------------------


class TestFindDrift:

    def test_reports_only_mismatches(self) -> None:
        from app.services.reconcile import find_drift

        jobs = [
            {"id": JOB_A, "applications_count": 2},
            {"id": JOB_B, "applications_count": 5},
            {"id": JOB_C, "applications_count": None},
        ]
        actual = Counter({JOB_A: 2, JOB_B: 3, JOB_C: 1})

        corrections = find_drift(jobs, actual)

        assert [(str(c.job_id), c.stored_count, c.actual_count) for c in corrections] == [
            (JOB_B, 5, 3),
            (JOB_C, 0, 1),
        ]

    def test_null_count_with_no_applicants_is_not_drift(self) -> None:
        from app.services.reconcile import find_drift

        assert find_drift([{"id": JOB_A, "applications_count": None}], Counter()) == []


class TestReconcileRun:

    @patch("app.services.reconcile.get_supabase")
    def test_corrects_drifted_counters(self, mock_get_supabase: MagicMock) -> None:
        mock_sb, jobs_table = _mock_supabase_for_reconcile(
            jobs=[
                {"id": JOB_A, "applications_count": 4},
                {"id": JOB_B, "applications_count": 1},
            ],
            cvs=[
                {"job_id": JOB_A},
                {"job_id": JOB_B},
                {"job_id": JOB_B},
                {"job_id": None},
            ],
        )
        mock_get_supabase.return_value = mock_sb

        from app.scheduler.lock import reconcile_lock
        from app.services.reconcile import reconcile_applications_count

        result = reconcile_applications_count(trigger="manual")

        assert result.status == "success"
        assert result.trigger == "manual"
        assert result.jobs_checked == 2
        assert result.jobs_corrected == 2
        updates = [c.args[0] for c in jobs_table.update.call_args_list]
        assert updates == [{"applications_count": 1}, {"applications_count": 2}]
        assert reconcile_lock.held is False

    @patch("app.services.reconcile.get_supabase")
    def test_no_drift_writes_nothing(self, mock_get_supabase: MagicMock) -> None:
        mock_sb, jobs_table = _mock_supabase_for_reconcile(
            jobs=[{"id": JOB_A, "applications_count": 1}],
            cvs=[{"job_id": JOB_A}],
        )
        mock_get_supabase.return_value = mock_sb

        from app.services.reconcile import reconcile_applications_count

        result = reconcile_applications_count()

        assert result.status == "success"
        assert result.jobs_corrected == 0
        jobs_table.update.assert_not_called()

    @patch("app.services.reconcile.get_supabase")
    def test_database_error_returns_failed_and_releases_lock(
        self, mock_get_supabase: MagicMock
    ) -> None:
        mock_get_supabase.side_effect = Exception("Connection refused")

        from app.scheduler.lock import reconcile_lock
        from app.services.reconcile import reconcile_applications_count

        result = reconcile_applications_count()

        assert result.status == "failed"
        assert result.error == "Connection refused"
        assert reconcile_lock.held is False

    @patch("app.services.reconcile.get_supabase")
    def test_held_lock_skips_run(self, mock_get_supabase: MagicMock) -> None:
        from app.scheduler.lock import reconcile_lock
        from app.services.reconcile import reconcile_applications_count

        try:
            assert reconcile_lock.acquire(uuid4()) is True
            result = reconcile_applications_count()
        finally:
            reconcile_lock.release()

        assert result.status == "skipped"
        mock_get_supabase.assert_not_called()


# ---------------------------------------------------------------------------
# Manual trigger endpoint
# ---------------------------------------------------------------------------


class TestManualTriggerEndpoint:
    """POST /maintenance/reconcile starts a run or returns 409."""

    @patch("app.routers.maintenance.reconcile_applications_count")
    def test_trigger_returns_202(
        self,
        mock_reconcile: MagicMock,
        test_client: TestClient,
        as_admin: None,
    ) -> None:
        response = test_client.post("/api/v1/maintenance/reconcile")

        assert response.status_code == 202
        body = response.json()
        assert body["status"] == "started"
        assert "run_id" in body

    @patch("app.routers.maintenance.reconcile_applications_count")
    def test_trigger_returns_409_when_locked(
        self,
        mock_reconcile: MagicMock,
        test_client: TestClient,
        as_admin: None,
    ) -> None:
        from app.scheduler.lock import reconcile_lock

        run_id = uuid4()
        try:
            assert reconcile_lock.acquire(run_id) is True
            response = test_client.post("/api/v1/maintenance/reconcile")
        finally:
            reconcile_lock.release()

        assert response.status_code == 409
        assert "Reconcile already in progress" in response.json()["detail"]
        assert response.headers["X-Current-Run-Id"] == str(run_id)
        mock_reconcile.assert_not_called()

    def test_trigger_requires_admin(
        self, test_client: TestClient, as_applicant: None
    ) -> None:
        response = test_client.post("/api/v1/maintenance/reconcile")
        assert response.status_code == 403


class TestHealthCheckScheduler:
    """Health endpoint reports scheduler state."""

    @patch("app.routers.health.is_scheduler_running", return_value=True)
    @patch("app.routers.health.get_supabase")
    def test_health_running_scheduler(
        self,
        mock_get_supabase: MagicMock,
        mock_is_running: MagicMock,
        test_client: TestClient,
    ) -> None:
        mock_sb = MagicMock()
        table_mock = _chainable_table_mock()
        table_mock.execute.return_value = MagicMock(data=[{"id": "x"}])
        mock_sb.table.return_value = table_mock
        mock_get_supabase.return_value = mock_sb

        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "database": "connected",
            "scheduler": "running",
        }

    @patch("app.routers.health.is_scheduler_running", return_value=False)
    @patch("app.routers.health.get_supabase")
    def test_health_stopped_scheduler(
        self,
        mock_get_supabase: MagicMock,
        mock_is_running: MagicMock,
        test_client: TestClient,
    ) -> None:
        mock_sb = MagicMock()
        mock_sb.table.return_value = _chainable_table_mock()
        mock_get_supabase.return_value = mock_sb

        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["scheduler"] == "stopped"

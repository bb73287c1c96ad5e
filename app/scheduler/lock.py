"""Process-local run lock for the applications-count reconcile.

Scheduled and manual reconcile runs share one ``RunLock``.  Acquire never
blocks: a caller that finds it held gets False and either skips the run
or answers 409 with the id of the run in progress.  Only one worker
process is assumed; separate processes do not see each other's lock.
"""

from __future__ import annotations

import threading
from uuid import UUID


class RunLock:
    """A non-blocking ``threading.Lock`` that remembers which run holds it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._run_id: UUID | None = None

    def acquire(self, run_id: UUID) -> bool:
        if not self._lock.acquire(blocking=False):
            return False
        self._run_id = run_id
        return True

    def release(self) -> None:
        """Free the lock; a no-op when nobody holds it."""
        self._run_id = None
        if self._lock.locked():
            self._lock.release()

    @property
    def run_id(self) -> UUID | None:
        return self._run_id

    @property
    def held(self) -> bool:
        return self._lock.locked()


reconcile_lock = RunLock()

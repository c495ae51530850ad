import threading
from collections.abc import Callable

ProgressCallback = Callable[[float], None]


class ProgressTracker:
    """Maps job ids to a single progress callback.

    Values are clamped to [0, 100]; ordering between updates is whatever the
    routine emits, the tracker does not enforce monotonicity.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, ProgressCallback] = {}
        self._cancelled: set[str] = set()
        self._lock = threading.Lock()

    def track_progress(self, job_id: str, callback: ProgressCallback) -> None:
        """Register callback for job_id, replacing any earlier one."""
        with self._lock:
            self._callbacks[job_id] = callback

    def update_progress(self, job_id: str, progress: float) -> None:
        with self._lock:
            callback = self._callbacks.get(job_id)
        if callback is not None:
            callback(min(100.0, max(0.0, float(progress))))

    def complete_progress(self, job_id: str) -> None:
        """Emit 100 and deregister."""
        self.update_progress(job_id, 100)
        self._forget(job_id)

    def remove_progress(self, job_id: str) -> None:
        """Deregister without emitting a final value."""
        self._forget(job_id)

    def is_tracked(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._callbacks

    def cancel(self, job_id: str) -> None:
        """Ask the routine running job_id to stop at its next milestone."""
        with self._lock:
            self._cancelled.add(job_id)

    def is_cancelled(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._cancelled

    def _forget(self, job_id: str) -> None:
        with self._lock:
            self._callbacks.pop(job_id, None)
            self._cancelled.discard(job_id)

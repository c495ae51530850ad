from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from filetools.logging.logger import Log
from filetools.worker.job_runner import JobOutcome, JobRequest, JobRunner


class WorkerPool:
    """Runs independent jobs in parallel on a thread pool.

    Jobs race independently; outcomes are returned in request order and one
    failure never stops the others.
    """

    def __init__(self, job_runner: JobRunner, max_workers: int) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self._job_runner = job_runner
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def run_all(self, requests: Sequence[JobRequest]) -> list[JobOutcome]:
        if not requests:
            return []
        workers = min(self._max_workers, len(requests))
        Log.info(f"Worker pool starting {len(requests)} jobs on {workers} threads")
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="filetools") as pool:
            outcomes = list(pool.map(self._job_runner.run_safely, requests))
        failed = sum(1 for outcome in outcomes if not outcome.succeeded)
        Log.info(f"Worker pool finished: {len(outcomes) - failed} succeeded, {failed} failed")
        return outcomes

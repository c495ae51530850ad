from abc import ABC, abstractmethod

from filetools.processor.exceptions import JobCancelledError
from filetools.processor.models import ProcessedFile, ProcessingOptions, SourceFile
from filetools.progress.tracker import ProgressTracker


class BaseTool(ABC):
    """Contract for one file transformation.

    Routines raise plain or adapter errors; wrapping them into
    ProcessingError is the processor's job.
    """

    def __init__(self, tracker: ProgressTracker) -> None:
        self._tracker = tracker

    @abstractmethod
    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        """Transform file and return the result.

        Args:
            file: Primary input file, already validated.
            options: Job options; multi-file tools read ``additional_files``.
            job_id: Id to report progress milestones against.
        """

    def _report(self, job_id: str, progress: float) -> None:
        """Emit a milestone and stop here if the job was cancelled."""
        self._tracker.update_progress(job_id, progress)
        if self._tracker.is_cancelled(job_id):
            raise JobCancelledError(f"Job {job_id} cancelled at {progress:.0f}%")

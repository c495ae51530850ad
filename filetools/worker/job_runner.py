from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from filetools.logging.logger import Log
from filetools.processor.error_handler import ErrorHandler
from filetools.processor.exceptions import RATE_LIMITED, ProcessingError
from filetools.processor.models import ProcessedFile, ProcessingOptions, SourceFile
from filetools.processor.processor import FileProcessor
from filetools.progress.tracker import ProgressCallback
from filetools.ratelimit.rate_limiter import RateLimiter
from filetools.tools.registry import ToolId


@dataclass(frozen=True)
class JobRequest:
    """One (file, tool, options) triple submitted on behalf of a caller."""

    identifier: str
    file: SourceFile
    tool_id: str | ToolId
    options: ProcessingOptions | Mapping[str, Any] | None = None
    on_progress: ProgressCallback | None = field(default=None, compare=False)


@dataclass(frozen=True)
class JobOutcome:
    request: JobRequest
    result: ProcessedFile | None = None
    error: ProcessingError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class JobRunner:
    """Gate one job through the rate limiter, then hand it to the processor."""

    def __init__(
        self,
        processor: FileProcessor,
        rate_limiter: RateLimiter,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self._processor = processor
        self._rate_limiter = rate_limiter
        self._error_handler = error_handler or ErrorHandler()

    def run(self, request: JobRequest) -> ProcessedFile:
        """Execute a single job.

        Raises:
            ProcessingError: RATE_LIMITED when the caller is over its window,
                or whatever the processor raised.
        """
        if not self._rate_limiter.is_allowed(request.identifier):
            reset_at = self._rate_limiter.get_reset_time(request.identifier)
            Log.warning(f"Rate limit exceeded for '{request.identifier}', resets at {reset_at:.0f}")
            raise ProcessingError(
                "Too many requests. Please wait before processing more files.",
                code=RATE_LIMITED,
                recoverable=True,
                context="rate_limit",
            )

        Log.info(f"Running {request.tool_id} for '{request.identifier}' on '{request.file.name}'")
        try:
            result = self._processor.process_file(
                request.file,
                request.tool_id,
                request.options,
                on_progress=request.on_progress,
            )
        except ProcessingError as exc:
            Log.error(f"Job for '{request.identifier}' failed: [{exc.code}] {exc.message}")
            raise
        Log.info(f"Job for '{request.identifier}' completed: {result.file_name}")
        return result

    def run_safely(self, request: JobRequest) -> JobOutcome:
        """Like run(), but capture any failure in the outcome as a ProcessingError."""
        try:
            return JobOutcome(request=request, result=self.run(request))
        except Exception as exc:
            error = self._error_handler.handle(exc, context="job_runner")
            return JobOutcome(request=request, error=error)

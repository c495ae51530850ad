import uuid
from collections.abc import Mapping
from typing import Any

from filetools.config.settings import Settings
from filetools.logging.logger import Log
from filetools.processor.error_handler import ErrorHandler
from filetools.processor.exceptions import INVALID_OPTIONS, VALIDATION_ERROR, ProcessingError
from filetools.processor.models import (
    JobState,
    ProcessedFile,
    ProcessingOptions,
    SourceFile,
    ValidationResult,
)
from filetools.progress.tracker import ProgressCallback, ProgressTracker
from filetools.tools.base import BaseTool
from filetools.tools.factory import ToolFactory, ensure_exhaustive
from filetools.tools.registry import ToolConfig, ToolId, ToolRegistry, build_default_registry
from filetools.validation.validator import validate_file, validate_file_content


class FileProcessor:
    """Runs one job: validate -> dispatch to the tool routine -> result.

    Job lifecycle: created -> validating -> processing -> completed | failed.
    A job that fails validation never reaches a routine.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        tools: Mapping[ToolId, BaseTool],
        tracker: ProgressTracker,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        ensure_exhaustive(tools)
        self._registry = registry
        self._tools = dict(tools)
        self._tracker = tracker
        self._error_handler = error_handler or ErrorHandler()

    @property
    def tracker(self) -> ProgressTracker:
        return self._tracker

    def process_file(
        self,
        file: SourceFile,
        tool_id: str | ToolId,
        options: ProcessingOptions | Mapping[str, Any] | None = None,
        on_progress: ProgressCallback | None = None,
        job_id: str | None = None,
    ) -> ProcessedFile:
        """Process a single file with the given tool.

        Args:
            file: Input file with its declared MIME type.
            tool_id: Tool name or ToolId.
            options: ProcessingOptions or a loose mapping of option keys.
            on_progress: Receives clamped percentages while the routine runs.
            job_id: Caller-chosen id (e.g. to cancel from another thread);
                generated when omitted.

        Raises:
            ProcessingError: on any failure, classified by code.
        """
        job_id = job_id or generate_job_id()
        try:
            return self._process(file, tool_id, options, on_progress, job_id)
        finally:
            # Drops the callback and any cancel mark whichever way the job ended.
            self._tracker.remove_progress(job_id)

    def _process(
        self,
        file: SourceFile,
        tool_id: str | ToolId,
        options: ProcessingOptions | Mapping[str, Any] | None,
        on_progress: ProgressCallback | None,
        job_id: str,
    ) -> ProcessedFile:
        tool = ToolId.parse(tool_id)
        opts = _coerce_options(options)
        Log.info(
            f"Job {job_id} {JobState.CREATED.value}: {tool.value} "
            f"on '{file.name}' ({file.size} bytes)"
        )

        validation = self.validate_for_tool(file, tool, opts)
        if not validation.is_valid:
            Log.warning(
                f"Job {job_id} {JobState.FAILED.value} validation: {list(validation.errors)}"
            )
            raise ProcessingError(
                ", ".join(validation.errors),
                code=VALIDATION_ERROR,
                recoverable=True,
                context="file_validation",
            )

        if on_progress is not None:
            self._tracker.track_progress(job_id, on_progress)
        try:
            self._tracker.update_progress(job_id, 0)
            result = self._tools[tool].run(file, opts, job_id)
            self._tracker.complete_progress(job_id)
        except Exception as exc:
            error = self._error_handler.handle(exc, context=f"tool_{tool.value}")
            Log.error(
                f"Job {job_id} {JobState.FAILED.value} during "
                f"{JobState.PROCESSING.value}: {error.code}"
            )
            raise error from exc

        Log.info(
            f"Job {job_id} {JobState.COMPLETED.value}: '{result.file_name}' ({result.size} bytes)"
        )
        return result

    def validate_for_tool(
        self,
        file: SourceFile,
        tool: ToolId,
        options: ProcessingOptions | None = None,
    ) -> ValidationResult:
        """Validate the primary file and any ``additional_files`` against the tool's limits."""
        config = self._registry.get(tool)
        inputs = [file, *(options.additional_files if options else ())]
        errors: list[str] = []
        for source in inputs:
            errors.extend(_validate_one(source, config))
        return ValidationResult(is_valid=not errors, errors=tuple(errors))


def _validate_one(file: SourceFile, config: ToolConfig) -> list[str]:
    errors: list[str] = []
    if not validate_file_content(file):
        errors.append("File content validation failed")
    errors.extend(validate_file(file, config.allowed_types, config.max_size).errors)
    return errors


def _coerce_options(options: ProcessingOptions | Mapping[str, Any] | None) -> ProcessingOptions:
    if isinstance(options, ProcessingOptions):
        return options
    try:
        return ProcessingOptions.from_mapping(options)
    except (TypeError, ValueError) as exc:
        raise ProcessingError(
            f"Invalid processing options: {exc}",
            code=INVALID_OPTIONS,
            recoverable=True,
            context="options",
        ) from exc


def generate_job_id() -> str:
    return uuid.uuid4().hex[:16]


def build_processor(
    settings: Settings,
    tracker: ProgressTracker | None = None,
) -> FileProcessor:
    """Build a FileProcessor with the default registry and all tools."""
    tracker = tracker or ProgressTracker()
    registry = build_default_registry(settings)
    tools = ToolFactory.create(settings, tracker)
    return FileProcessor(
        registry=registry,
        tools=tools,
        tracker=tracker,
        error_handler=ErrorHandler(),
    )

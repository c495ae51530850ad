"""Turns any failure raised inside a tool routine into a ProcessingError."""

import uuid

from filetools.logging.logger import Log
from filetools.processor.exceptions import (
    CANCELLED,
    INVALID_OPTIONS,
    PERMISSION_DENIED,
    QUOTA_EXCEEDED,
    ErrorKind,
    InvalidOptionsError,
    JobCancelledError,
    ProcessingError,
    classify_exception,
    is_quota_error,
    root_causes,
)

USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CORRUPTED: "The file appears to be corrupted. Please try with a different file.",
    ErrorKind.TIMEOUT: "Processing timed out. Please try with a smaller file.",
    ErrorKind.OUT_OF_MEMORY: (
        "Insufficient memory to process this file. Please try with a smaller file."
    ),
    ErrorKind.UNSUPPORTED: "This file or operation is not supported.",
    ErrorKind.UNKNOWN: "An unexpected error occurred. Please try again.",
}

ERROR_CODES: dict[ErrorKind, str] = {
    ErrorKind.CORRUPTED: "CORRUPTED_FILE",
    ErrorKind.TIMEOUT: "TIMEOUT",
    ErrorKind.OUT_OF_MEMORY: "OUT_OF_MEMORY",
    ErrorKind.UNSUPPORTED: "UNSUPPORTED",
    ErrorKind.UNKNOWN: "PROCESSING_FAILED",
}

NON_RECOVERABLE_KINDS = frozenset({ErrorKind.UNSUPPORTED})

PERMISSION_MESSAGE = "Access to this file was denied."
QUOTA_MESSAGE = "Not enough storage space to finish processing this file."


class ErrorHandler:
    """Classifies routine failures and logs them under a short error id."""

    def handle(self, exc: BaseException, context: str) -> ProcessingError:
        if isinstance(exc, ProcessingError):
            return exc

        error_id = uuid.uuid4().hex[:9]
        Log.exception(f"[{context}] Error {error_id}: {exc!r}", exc)

        if isinstance(exc, JobCancelledError):
            return ProcessingError(
                "Processing was cancelled.",
                code=CANCELLED,
                recoverable=True,
                context=context,
                error_id=error_id,
            )
        if isinstance(exc, InvalidOptionsError):
            return ProcessingError(
                str(exc),
                code=INVALID_OPTIONS,
                recoverable=True,
                context=context,
                error_id=error_id,
            )

        for cause in root_causes(exc):
            if isinstance(cause, PermissionError):
                return ProcessingError(
                    PERMISSION_MESSAGE,
                    code=PERMISSION_DENIED,
                    recoverable=False,
                    context=context,
                    error_id=error_id,
                )
            if is_quota_error(cause):
                return ProcessingError(
                    QUOTA_MESSAGE,
                    code=QUOTA_EXCEEDED,
                    recoverable=False,
                    context=context,
                    error_id=error_id,
                )

        kind = classify_exception(exc)
        return ProcessingError(
            USER_MESSAGES[kind],
            code=ERROR_CODES[kind],
            recoverable=kind not in NON_RECOVERABLE_KINDS,
            context=context,
            error_id=error_id,
        )

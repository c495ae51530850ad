import errno
from enum import Enum

VALIDATION_ERROR = "VALIDATION_ERROR"
TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
RATE_LIMITED = "RATE_LIMITED"
CANCELLED = "CANCELLED"
INVALID_OPTIONS = "INVALID_OPTIONS"
PERMISSION_DENIED = "PERMISSION_DENIED"
QUOTA_EXCEEDED = "QUOTA_EXCEEDED"

_QUOTA_ERRNOS = frozenset(
    code for code in (errno.ENOSPC, getattr(errno, "EDQUOT", None)) if code is not None
)


class ErrorKind(str, Enum):
    """Closed set of failure kinds produced by vendor-library adapters."""

    CORRUPTED = "corrupted"
    TIMEOUT = "timeout"
    OUT_OF_MEMORY = "out_of_memory"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


class ProcessingError(Exception):
    """The only error shape callers of the processing pipeline observe."""

    def __init__(
        self,
        message: str,
        code: str,
        recoverable: bool = True,
        context: str | None = None,
        error_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.context = context
        self.error_id = error_id

    def __repr__(self) -> str:
        return (
            f"ProcessingError(code={self.code!r}, recoverable={self.recoverable}, "
            f"context={self.context!r}, message={self.message!r})"
        )


class ToolError(Exception):
    """Base exception for failures inside a tool routine or its adapters."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class InvalidOptionsError(ToolError):
    """Raised when a tool receives options it cannot act on."""

    kind = ErrorKind.UNSUPPORTED


class JobCancelledError(Exception):
    """Raised inside a routine when its job was cancelled between milestones."""


def classify_exception(exc: BaseException, default: ErrorKind = ErrorKind.UNKNOWN) -> ErrorKind:
    """Map a raw exception onto an ErrorKind by type."""
    if isinstance(exc, ToolError):
        return exc.kind
    if isinstance(exc, MemoryError):
        return ErrorKind.OUT_OF_MEMORY
    if isinstance(exc, TimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(exc, NotImplementedError):
        return ErrorKind.UNSUPPORTED
    return default


def is_quota_error(exc: BaseException) -> bool:
    """True for OSErrors raised because the disk is full or a quota is exhausted."""
    return isinstance(exc, OSError) and exc.errno in _QUOTA_ERRNOS


def root_causes(exc: BaseException) -> list[BaseException]:
    """exc followed by its explicit ``__cause__`` chain."""
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__
    return chain

from filetools.processor.exceptions import ErrorKind, ToolError


class ImageError(ToolError):
    """Raised when an image cannot be decoded or encoded."""

    kind = ErrorKind.CORRUPTED

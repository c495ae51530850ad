from filetools.processor.exceptions import ErrorKind, ToolError


class PdfError(ToolError):
    """Raised when a PDF cannot be opened, edited or written."""

    kind = ErrorKind.CORRUPTED


class PdfExtractionError(PdfError):
    """Raised when text extraction from a PDF fails."""


class PdfEncryptedError(PdfError):
    """Raised when a PDF needs a password the caller did not supply."""

    kind = ErrorKind.UNSUPPORTED

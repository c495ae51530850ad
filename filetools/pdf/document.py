"""PyMuPDF helpers for the PDF editing tools.

Vendor exceptions are translated into PdfError here so tool routines and the
processor only ever see ErrorKind-tagged failures.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import pymupdf

from filetools.pdf.exceptions import PdfEncryptedError, PdfError
from filetools.processor.exceptions import (
    ErrorKind,
    InvalidOptionsError,
    JobCancelledError,
    ToolError,
    classify_exception,
)


@contextmanager
def pdf_errors(action: str) -> Iterator[None]:
    """Re-raise anything PyMuPDF throws inside the block as PdfError."""
    try:
        yield
    except (ToolError, JobCancelledError):
        raise
    except Exception as exc:
        raise PdfError(
            f"{action} failed: {exc}",
            kind=classify_exception(exc, default=ErrorKind.CORRUPTED),
        ) from exc


def open_pdf(pdf_bytes: bytes, password: str = "") -> pymupdf.Document:
    """Open PDF bytes, authenticating with password when the file is encrypted.

    Raises:
        PdfError: if the bytes are not a readable PDF.
        PdfEncryptedError: if the PDF is encrypted and no password was given.
        InvalidOptionsError: if the given password is wrong.
    """
    with pdf_errors("Opening PDF"):
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
    if doc.needs_pass:
        if not password:
            doc.close()
            raise PdfEncryptedError("PDF is password-protected")
        if not doc.authenticate(password):
            doc.close()
            raise InvalidOptionsError("Incorrect password for PDF")
    return doc


def new_pdf() -> pymupdf.Document:
    return pymupdf.open()  # type: ignore[no-untyped-call]


def save_pdf(doc: pymupdf.Document, **save_options: object) -> bytes:
    """Serialize doc to bytes; save_options go straight to Document.tobytes."""
    with pdf_errors("Saving PDF"):
        return doc.tobytes(**save_options)


def select_page_indices(page_count: int, pages: tuple[int, ...]) -> list[int]:
    """Zero-based indices for 1-based page numbers; empty selects every page.

    Out-of-range numbers are dropped.
    """
    if not pages:
        return list(range(page_count))
    return sorted({p - 1 for p in pages if 1 <= p <= page_count})


def parse_ranges(value: str, page_count: int) -> list[tuple[int, int]]:
    """Parse ``"1-3,5"`` into 1-based inclusive ranges clamped to the document.

    Raises:
        InvalidOptionsError: on malformed input or when nothing is selected.
    """
    ranges: list[tuple[int, int]] = []
    for part in value.split(","):
        cleaned = part.strip()
        if not cleaned:
            continue
        start, _, end = cleaned.partition("-")
        try:
            start_i = max(1, int(start))
            end_i = min(page_count, int(end or start))
        except ValueError:
            raise InvalidOptionsError(f"Invalid page range '{cleaned}'") from None
        if start_i <= end_i:
            ranges.append((start_i, end_i))
    if not ranges:
        raise InvalidOptionsError(f"No valid page ranges in '{value}'")
    return ranges

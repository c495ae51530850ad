import io

import pdfplumber
from pdfminer.pdfdocument import PDFEncryptionError

from filetools.pdf.base import BasePdfExtractor
from filetools.pdf.exceptions import PdfEncryptedError, PdfError, PdfExtractionError
from filetools.processor.exceptions import ErrorKind, classify_exception


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [(page.extract_text() or "").strip() for page in pdf.pages]
        except PdfError:
            raise
        except Exception as exc:
            if _is_password_error(exc):
                raise PdfEncryptedError("PDF is password-protected") from exc
            raise PdfExtractionError(
                f"pdfplumber extraction failed: {exc}",
                kind=classify_exception(exc, default=ErrorKind.CORRUPTED),
            ) from exc


def _is_password_error(exc: BaseException) -> bool:
    # pdfplumber re-raises pdfminer errors wrapped in PdfminerException(original).
    seen: set[int] = set()
    pending: list[object] = [exc]
    while pending:
        current = pending.pop()
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, PDFEncryptionError):
            return True
        pending.extend((current.__cause__, current.__context__, *current.args))
    return False

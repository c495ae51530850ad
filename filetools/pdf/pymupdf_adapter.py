import pymupdf

from filetools.pdf.base import BasePdfExtractor
from filetools.pdf.exceptions import PdfEncryptedError, PdfError, PdfExtractionError
from filetools.processor.exceptions import ErrorKind, classify_exception


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise PdfEncryptedError("PDF is password-protected")
                return [page.get_text().strip() for page in doc]
        except PdfError:
            raise
        except Exception as exc:
            raise PdfExtractionError(
                f"pymupdf extraction failed: {exc}",
                kind=classify_exception(exc, default=ErrorKind.CORRUPTED),
            ) from exc

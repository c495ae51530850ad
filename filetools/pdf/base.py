from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Extract plain text from PDF bytes, one string per page.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Page texts in document order; blank pages yield "".

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """

    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the whole document as a single stripped string."""
        return "\n".join(self.extract_pages(pdf_bytes)).strip()

from filetools.config.settings import PdfEngine, Settings
from filetools.logging.logger import Log
from filetools.pdf.base import BasePdfExtractor
from filetools.pdf.pdfplumber_adapter import PdfPlumberAdapter
from filetools.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Builds the text extractor behind pdf-to-text and pdf-to-word."""

    ADAPTERS: dict[PdfEngine, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        """Extractor for ``settings.pdf_engine`` (validated by Settings)."""
        return cls.for_engine(settings.pdf_engine)

    @classmethod
    def for_engine(cls, engine: str) -> BasePdfExtractor:
        """Extractor for an engine name that did not come through Settings.

        Raises:
            ValueError: for an engine with no adapter.
        """
        adapter_cls = cls.ADAPTERS.get(engine)  # type: ignore[call-overload]
        if adapter_cls is None:
            raise ValueError(
                f"No PDF text extractor for engine '{engine}'. Choose from: {sorted(cls.ADAPTERS)}"
            )
        Log.debug(f"PDF text extraction via {adapter_cls.__name__}")
        return adapter_cls()

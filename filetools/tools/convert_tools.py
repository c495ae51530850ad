import html

from filetools.image.pillow_adapter import PillowImageCodec
from filetools.pdf.base import BasePdfExtractor
from filetools.processor.models import ProcessedFile, ProcessingOptions, SourceFile
from filetools.progress.tracker import ProgressTracker
from filetools.tools.base import BaseTool

TEXT_MIME = "text/plain"
HTML_MIME = "text/html"
PDF_MIME = "application/pdf"

_WORD_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
        body {{ font-family: 'Times New Roman', serif; line-height: 1.6; margin: 1in; font-size: 12pt; }}
        p {{ margin-bottom: 12pt; }}
        .page-break {{ page-break-before: always; }}
    </style>
</head>
<body>
{body}
</body>
</html>
"""


class PdfToTextTool(BaseTool):
    """Extracts plain text, pages separated by a blank line."""

    def __init__(self, tracker: ProgressTracker, extractor: BasePdfExtractor) -> None:
        super().__init__(tracker)
        self._extractor = extractor

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        self._report(job_id, 10)
        pages = self._extractor.extract_pages(file.data)
        self._report(job_id, 70)
        text = "\n\n".join(page for page in pages if page).strip()
        buffer = text.encode("utf-8")
        self._report(job_id, 90)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}.txt", TEXT_MIME)


class PdfToWordTool(BaseTool):
    """Converts extracted text into a Word-openable HTML document."""

    def __init__(self, tracker: ProgressTracker, extractor: BasePdfExtractor) -> None:
        super().__init__(tracker)
        self._extractor = extractor

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        self._report(job_id, 10)
        pages = self._extractor.extract_pages(file.data)
        self._report(job_id, 50)

        sections: list[str] = []
        for index, page_text in enumerate(pages, start=1):
            sections.append(_page_section(page_text, first=index == 1))
            self._report(job_id, 50 + index / len(pages) * 40)

        document = _WORD_TEMPLATE.format(
            title=html.escape(file.stem),
            body="\n".join(section for section in sections if section),
        )
        buffer = document.encode("utf-8")
        self._report(job_id, 95)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}.html", HTML_MIME)


class ImageToPdfTool(BaseTool):
    """Places the primary image and ``additional_files`` one per page."""

    def __init__(self, tracker: ProgressTracker, codec: PillowImageCodec) -> None:
        super().__init__(tracker)
        self._codec = codec

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        sources = [file, *options.additional_files]
        self._report(job_id, 10)
        images = []
        for index, source in enumerate(sources, start=1):
            images.append(self._codec.decode(source.data))
            self._report(job_id, 10 + index / len(sources) * 70)
        buffer = self._codec.encode_pdf(images)
        self._report(job_id, 95)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}.pdf", PDF_MIME)


def _page_section(page_text: str, first: bool) -> str:
    paragraphs = [p.strip() for p in page_text.split("\n\n") if p.strip()]
    if not paragraphs:
        return ""
    css_class = "" if first else ' class="page-break"'
    rendered = "\n".join(
        f"<p>{html.escape(p).replace(chr(10), '<br>')}</p>" for p in paragraphs
    )
    return f"<div{css_class}>\n{rendered}\n</div>"

import io
import zipfile

import pymupdf

from filetools.pdf.document import (
    new_pdf,
    open_pdf,
    parse_ranges,
    pdf_errors,
    save_pdf,
    select_page_indices,
)
from filetools.processor.exceptions import InvalidOptionsError
from filetools.processor.models import ProcessedFile, ProcessingOptions, SourceFile
from filetools.tools.base import BaseTool

PDF_MIME = "application/pdf"
ZIP_MIME = "application/zip"

WATERMARK_COLOR = (0.5, 0.5, 0.5)
WATERMARK_ANGLE = 45


class MergePdfTool(BaseTool):
    """Concatenates the primary file and ``additional_files`` in order."""

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        sources = [file, *options.additional_files]
        self._report(job_id, 10)
        merged = new_pdf()
        try:
            for index, source in enumerate(sources, start=1):
                with open_pdf(source.data) as doc, pdf_errors(f"Merging {source.name}"):
                    merged.insert_pdf(doc)
                self._report(job_id, 10 + index / len(sources) * 80)
            buffer = save_pdf(merged, garbage=3, deflate=True)
        finally:
            merged.close()
        self._report(job_id, 95)
        return ProcessedFile.from_bytes(buffer, "merged_document.pdf", PDF_MIME)


class SplitPdfTool(BaseTool):
    """Splits into one PDF per page, or per ``ranges``, packed into a ZIP."""

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        self._report(job_id, 10)
        archive = io.BytesIO()
        with open_pdf(file.data) as doc:
            page_count = doc.page_count
            if options.ranges:
                ranges = parse_ranges(options.ranges, page_count)
            else:
                ranges = [(page, page) for page in range(1, page_count + 1)]
            self._report(job_id, 30)
            with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
                for index, (start, end) in enumerate(ranges, start=1):
                    part = new_pdf()
                    try:
                        with pdf_errors(f"Splitting pages {start}-{end}"):
                            part.insert_pdf(doc, from_page=start - 1, to_page=end - 1)
                        zf.writestr(_part_name(file.stem, start, end), save_pdf(part, garbage=3, deflate=True))
                    finally:
                        part.close()
                    self._report(job_id, 30 + index / len(ranges) * 60)
        self._report(job_id, 95)
        return ProcessedFile.from_bytes(archive.getvalue(), f"{file.stem}_split.zip", ZIP_MIME)


class CompressPdfTool(BaseTool):
    """Re-saves the PDF with garbage collection and stream deflation.

    This is a re-save, not a recompressor; the output can be larger.
    """

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        self._report(job_id, 10)
        with open_pdf(file.data) as doc:
            self._report(job_id, 60)
            if options.compression:
                buffer = save_pdf(
                    doc,
                    garbage=4,
                    clean=True,
                    deflate=True,
                    deflate_images=True,
                    deflate_fonts=True,
                )
            else:
                buffer = save_pdf(doc, garbage=1)
        self._report(job_id, 90)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}_compressed.pdf", PDF_MIME)


class RotatePagesTool(BaseTool):
    """Rotates ``pages`` (all when empty) clockwise by ``rotation`` degrees."""

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        if options.rotation % 90 != 0:
            raise InvalidOptionsError(
                f"Rotation must be a multiple of 90 degrees, got {options.rotation}"
            )
        self._report(job_id, 10)
        with open_pdf(file.data) as doc:
            indices = select_page_indices(doc.page_count, options.pages)
            if not indices:
                raise InvalidOptionsError("No valid pages selected")
            self._report(job_id, 40)
            with pdf_errors("Rotating pages"):
                for index in indices:
                    page = doc[index]
                    page.set_rotation((page.rotation + options.rotation) % 360)
            self._report(job_id, 70)
            buffer = save_pdf(doc, garbage=1, deflate=True)
        self._report(job_id, 90)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}_rotated.pdf", PDF_MIME)


class AddWatermarkTool(BaseTool):
    """Stamps ``watermark_text`` diagonally across the centre of every page."""

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        text = options.watermark_text.strip()
        if not text:
            raise InvalidOptionsError("Watermark text is required")
        if options.font_size <= 0:
            raise InvalidOptionsError(f"Font size must be positive, got {options.font_size}")
        opacity = min(1.0, max(0.0, options.watermark_opacity))
        self._report(job_id, 10)
        with open_pdf(file.data) as doc:
            self._report(job_id, 30)
            with pdf_errors("Adding watermark"):
                text_width = pymupdf.get_text_length(text, fontname="helv", fontsize=options.font_size)
                for index, page in enumerate(doc, start=1):
                    rect = page.rect
                    center = pymupdf.Point(rect.x0 + rect.width / 2, rect.y0 + rect.height / 2)
                    page.insert_text(
                        pymupdf.Point(center.x - text_width / 2, center.y),
                        text,
                        fontsize=options.font_size,
                        fontname="helv",
                        color=WATERMARK_COLOR,
                        fill_opacity=opacity,
                        morph=(center, pymupdf.Matrix(WATERMARK_ANGLE)),
                    )
                    self._report(job_id, 30 + index / doc.page_count * 60)
            buffer = save_pdf(doc, garbage=1, deflate=True)
        self._report(job_id, 95)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}_watermarked.pdf", PDF_MIME)


class ProtectPdfTool(BaseTool):
    """Encrypts with AES-256; ``owner_password`` defaults to ``password``."""

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        if not options.password:
            raise InvalidOptionsError("A password is required to protect a PDF")
        self._report(job_id, 10)
        with open_pdf(file.data) as doc:
            self._report(job_id, 50)
            buffer = save_pdf(
                doc,
                garbage=1,
                deflate=True,
                encryption=pymupdf.PDF_ENCRYPT_AES_256,
                user_pw=options.password,
                owner_pw=options.owner_password or options.password,
            )
        self._report(job_id, 90)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}_protected.pdf", PDF_MIME)


class UnlockPdfTool(BaseTool):
    """Opens an encrypted PDF with ``password`` and writes it unencrypted."""

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        if not options.password:
            raise InvalidOptionsError("The PDF password is required to unlock it")
        self._report(job_id, 10)
        with open_pdf(file.data, password=options.password) as doc:
            self._report(job_id, 50)
            buffer = save_pdf(doc, garbage=1, deflate=True, encryption=pymupdf.PDF_ENCRYPT_NONE)
        self._report(job_id, 90)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}_unlocked.pdf", PDF_MIME)


def _part_name(stem: str, start: int, end: int) -> str:
    if start == end:
        return f"{stem}_page_{start}.pdf"
    return f"{stem}_pages_{start}-{end}.pdf"

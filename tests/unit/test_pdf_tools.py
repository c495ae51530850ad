import io
import zipfile

import pymupdf
import pytest

from filetools.pdf.exceptions import PdfEncryptedError, PdfError
from filetools.processor.exceptions import InvalidOptionsError, JobCancelledError
from filetools.processor.models import ProcessingOptions, SourceFile
from filetools.progress.tracker import ProgressTracker
from filetools.tools.pdf_tools import (
    AddWatermarkTool,
    CompressPdfTool,
    MergePdfTool,
    ProtectPdfTool,
    RotatePagesTool,
    SplitPdfTool,
    UnlockPdfTool,
)


def _open(data: bytes) -> pymupdf.Document:
    return pymupdf.open(stream=data, filetype="pdf")


def _tracked() -> tuple[ProgressTracker, list[float]]:
    tracker = ProgressTracker()
    seen: list[float] = []
    tracker.track_progress("job", seen.append)
    return tracker, seen


class TestMergePdfTool:
    def test_single_file_round_trip(self, pdf_file: SourceFile) -> None:
        result = MergePdfTool(ProgressTracker()).run(pdf_file, ProcessingOptions(), "job")

        assert result.mime_type == "application/pdf"
        assert result.file_name == "merged_document.pdf"
        assert result.size == len(result.buffer) > 0

    def test_merges_additional_files_in_order(
        self, pdf_file: SourceFile, two_page_pdf_file: SourceFile
    ) -> None:
        options = ProcessingOptions(additional_files=(two_page_pdf_file,))

        result = MergePdfTool(ProgressTracker()).run(pdf_file, options, "job")

        with _open(result.buffer) as doc:
            assert doc.page_count == 3
            assert "Hello PDF World" in doc[0].get_text()
            assert "Page two content" in doc[2].get_text()

    def test_progress_milestones_increase(self, pdf_file: SourceFile) -> None:
        tracker, seen = _tracked()

        MergePdfTool(tracker).run(pdf_file, ProcessingOptions(), "job")

        assert seen == sorted(seen)
        assert seen[0] == 10.0
        assert seen[-1] == 95.0

    def test_corrupted_input_raises_pdf_error(self) -> None:
        broken = SourceFile(name="x.pdf", mime_type="application/pdf", data=b"%PDF-1.7 garbage")
        with pytest.raises(PdfError):
            MergePdfTool(ProgressTracker()).run(broken, ProcessingOptions(), "job")

    def test_cancellation_stops_at_next_milestone(self, pdf_file: SourceFile) -> None:
        tracker = ProgressTracker()
        tracker.cancel("job")
        with pytest.raises(JobCancelledError):
            MergePdfTool(tracker).run(pdf_file, ProcessingOptions(), "job")


class TestSplitPdfTool:
    def test_one_file_per_page_by_default(self, three_page_pdf_bytes: bytes) -> None:
        file = SourceFile(name="book.pdf", mime_type="application/pdf", data=three_page_pdf_bytes)

        result = SplitPdfTool(ProgressTracker()).run(file, ProcessingOptions(), "job")

        assert result.mime_type == "application/zip"
        assert result.file_name == "book_split.zip"
        with zipfile.ZipFile(io.BytesIO(result.buffer)) as zf:
            assert zf.namelist() == ["book_page_1.pdf", "book_page_2.pdf", "book_page_3.pdf"]

    def test_split_by_ranges(self, three_page_pdf_bytes: bytes) -> None:
        file = SourceFile(name="book.pdf", mime_type="application/pdf", data=three_page_pdf_bytes)

        result = SplitPdfTool(ProgressTracker()).run(file, ProcessingOptions(ranges="1-2, 3"), "job")

        with zipfile.ZipFile(io.BytesIO(result.buffer)) as zf:
            assert zf.namelist() == ["book_pages_1-2.pdf", "book_page_3.pdf"]
            with _open(zf.read("book_pages_1-2.pdf")) as part:
                assert part.page_count == 2

    def test_invalid_ranges(self, pdf_file: SourceFile) -> None:
        with pytest.raises(InvalidOptionsError):
            SplitPdfTool(ProgressTracker()).run(pdf_file, ProcessingOptions(ranges="9-12"), "job")


class TestCompressPdfTool:
    def test_two_page_pdf_with_defaults(self, two_page_pdf_file: SourceFile) -> None:
        result = CompressPdfTool(ProgressTracker()).run(two_page_pdf_file, ProcessingOptions(), "job")

        assert result.file_name == "slides_compressed.pdf"
        assert result.file_name.endswith(".pdf")
        assert result.size > 0
        with _open(result.buffer) as doc:
            assert doc.page_count == 2

    def test_without_compression(self, pdf_file: SourceFile) -> None:
        result = CompressPdfTool(ProgressTracker()).run(
            pdf_file, ProcessingOptions(compression=False), "job"
        )
        assert result.size > 0

    def test_milestones(self, pdf_file: SourceFile) -> None:
        tracker, seen = _tracked()
        CompressPdfTool(tracker).run(pdf_file, ProcessingOptions(), "job")
        assert seen == [10.0, 60.0, 90.0]


class TestRotatePagesTool:
    def test_rotates_all_pages(self, two_page_pdf_file: SourceFile) -> None:
        result = RotatePagesTool(ProgressTracker()).run(
            two_page_pdf_file, ProcessingOptions(rotation=90), "job"
        )
        with _open(result.buffer) as doc:
            assert [page.rotation for page in doc] == [90, 90]

    def test_rotates_selected_pages_only(self, two_page_pdf_file: SourceFile) -> None:
        result = RotatePagesTool(ProgressTracker()).run(
            two_page_pdf_file, ProcessingOptions(rotation=180, pages=(2,)), "job"
        )
        with _open(result.buffer) as doc:
            assert [page.rotation for page in doc] == [0, 180]

    def test_rejects_non_right_angle(self, pdf_file: SourceFile) -> None:
        with pytest.raises(InvalidOptionsError, match="multiple of 90"):
            RotatePagesTool(ProgressTracker()).run(pdf_file, ProcessingOptions(rotation=45), "job")

    def test_rejects_out_of_range_pages(self, pdf_file: SourceFile) -> None:
        with pytest.raises(InvalidOptionsError, match="No valid pages"):
            RotatePagesTool(ProgressTracker()).run(pdf_file, ProcessingOptions(pages=(7,)), "job")


class TestAddWatermarkTool:
    def test_stamps_text_on_every_page(self, two_page_pdf_file: SourceFile) -> None:
        options = ProcessingOptions(watermark_text="CONFIDENTIAL", font_size=40)

        result = AddWatermarkTool(ProgressTracker()).run(two_page_pdf_file, options, "job")

        assert result.file_name == "slides_watermarked.pdf"
        with _open(result.buffer) as doc:
            assert all("CONFIDENTIAL" in page.get_text() for page in doc)

    def test_requires_text(self, pdf_file: SourceFile) -> None:
        with pytest.raises(InvalidOptionsError, match="Watermark text"):
            AddWatermarkTool(ProgressTracker()).run(pdf_file, ProcessingOptions(), "job")


class TestProtectAndUnlock:
    def test_protect_then_unlock(self, pdf_file: SourceFile) -> None:
        protected = ProtectPdfTool(ProgressTracker()).run(
            pdf_file, ProcessingOptions(password="s3cret"), "job"
        )
        with _open(protected.buffer) as doc:
            assert doc.needs_pass

        locked = SourceFile(name="report.pdf", mime_type="application/pdf", data=protected.buffer)
        unlocked = UnlockPdfTool(ProgressTracker()).run(
            locked, ProcessingOptions(password="s3cret"), "job"
        )

        assert unlocked.file_name == "report_unlocked.pdf"
        with _open(unlocked.buffer) as doc:
            assert not doc.needs_pass
            assert "Hello PDF World" in doc[0].get_text()

    def test_protect_requires_password(self, pdf_file: SourceFile) -> None:
        with pytest.raises(InvalidOptionsError):
            ProtectPdfTool(ProgressTracker()).run(pdf_file, ProcessingOptions(), "job")

    def test_unlock_with_wrong_password(self, pdf_file: SourceFile) -> None:
        protected = ProtectPdfTool(ProgressTracker()).run(
            pdf_file, ProcessingOptions(password="right"), "job"
        )
        locked = SourceFile(name="r.pdf", mime_type="application/pdf", data=protected.buffer)

        with pytest.raises(InvalidOptionsError, match="Incorrect password"):
            UnlockPdfTool(ProgressTracker()).run(locked, ProcessingOptions(password="wrong"), "job")

    def test_encrypted_input_to_other_tool(self, pdf_file: SourceFile) -> None:
        protected = ProtectPdfTool(ProgressTracker()).run(
            pdf_file, ProcessingOptions(password="pw"), "job"
        )
        locked = SourceFile(name="r.pdf", mime_type="application/pdf", data=protected.buffer)

        with pytest.raises(PdfEncryptedError):
            CompressPdfTool(ProgressTracker()).run(locked, ProcessingOptions(), "job")

import io

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from filetools.processor.models import SourceFile


def _pdf(*page_texts: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in page_texts:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


def _image(fmt: str, size: tuple[int, int] = (400, 200), mode: str = "RGB") -> bytes:
    buf = io.BytesIO()
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf("Hello PDF World")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf("Page one content", "Page two content")


@pytest.fixture()
def three_page_pdf_bytes() -> bytes:
    return _pdf("First page", "Second page", "Third page")


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf("")


@pytest.fixture()
def png_bytes() -> bytes:
    return _image("PNG")


@pytest.fixture()
def rgba_png_bytes() -> bytes:
    return _image("PNG", mode="RGBA")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return _image("JPEG")


@pytest.fixture()
def pdf_file(sample_pdf_bytes: bytes) -> SourceFile:
    return SourceFile(name="report.pdf", mime_type="application/pdf", data=sample_pdf_bytes)


@pytest.fixture()
def two_page_pdf_file(multi_page_pdf_bytes: bytes) -> SourceFile:
    return SourceFile(name="slides.pdf", mime_type="application/pdf", data=multi_page_pdf_bytes)


@pytest.fixture()
def png_file(png_bytes: bytes) -> SourceFile:
    return SourceFile(name="photo.png", mime_type="image/png", data=png_bytes)


@pytest.fixture()
def jpeg_file(jpeg_bytes: bytes) -> SourceFile:
    return SourceFile(name="photo.jpg", mime_type="image/jpeg", data=jpeg_bytes)

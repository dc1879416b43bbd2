import io
from collections.abc import Callable

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _build_pdf(page_count: int) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for page in range(page_count):
        c.drawString(72, 720, f"Page {page + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def make_pdf() -> Callable[[int], bytes]:
    """Factory for PDFs with the requested number of pages."""
    return _build_pdf


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """A minimal single-page PDF."""
    return _build_pdf(1)


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """An eight-page PDF, enough for the page-count heuristic to find two parts."""
    return _build_pdf(8)


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF with one blank page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()

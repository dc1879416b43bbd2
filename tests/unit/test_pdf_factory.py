from unittest.mock import MagicMock

import pytest

from score_intake.pdf.factory import PageCounterFactory
from score_intake.pdf.pdfplumber_adapter import PdfPlumberAdapter
from score_intake.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPageCounterFactory:
    def test_creates_pdfplumber_adapter(self) -> None:
        adapter = PageCounterFactory.create(MagicMock(pdf_engine="pdfplumber"))
        assert isinstance(adapter, PdfPlumberAdapter)

    def test_creates_pymupdf_adapter(self) -> None:
        adapter = PageCounterFactory.create(MagicMock(pdf_engine="pymupdf"))
        assert isinstance(adapter, PyMuPdfAdapter)

    def test_is_case_insensitive(self) -> None:
        adapter = PageCounterFactory.create(MagicMock(pdf_engine="PdfPlumber"))
        assert isinstance(adapter, PdfPlumberAdapter)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown page-counting engine .unknown. in PDF_ENGINE"):
            PageCounterFactory.create(MagicMock(pdf_engine="unknown"))

    def test_error_lists_available_engines(self) -> None:
        with pytest.raises(ValueError) as excinfo:
            PageCounterFactory.create(MagicMock(pdf_engine="poppler"))
        assert "'pdfplumber', 'pymupdf'" in str(excinfo.value)

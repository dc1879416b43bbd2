import pymupdf

from score_intake.exceptions import PdfAnalysisError
from score_intake.pdf.base import BasePageCounter


class PyMuPdfAdapter(BasePageCounter):
    """Counts PDF pages using PyMuPDF."""

    def count_pages(self, pdf_bytes: bytes) -> int:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return int(doc.page_count)
        except Exception as exc:
            raise PdfAnalysisError(f"pymupdf could not read document: {exc}") from exc

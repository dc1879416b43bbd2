import io

import pdfplumber

from score_intake.exceptions import PdfAnalysisError
from score_intake.pdf.base import BasePageCounter


class PdfPlumberAdapter(BasePageCounter):
    """Counts PDF pages using pdfplumber."""

    def count_pages(self, pdf_bytes: bytes) -> int:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfAnalysisError(f"pdfplumber could not read document: {exc}") from exc

from score_intake.config.settings import Settings
from score_intake.pdf.base import BasePageCounter
from score_intake.pdf.pdfplumber_adapter import PdfPlumberAdapter
from score_intake.pdf.pymupdf_adapter import PyMuPdfAdapter


class PageCounterFactory:
    """Picks the page counter that feeds part-structure analysis.

    Only the page count is read from the PDF; the part estimate itself is
    engine independent, so either adapter yields the same analysis.
    """

    ADAPTERS: dict[str, type[BasePageCounter]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePageCounter:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown page-counting engine '{engine}' in PDF_ENGINE. "
                f"Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()

from abc import ABC, abstractmethod


class BasePageCounter(ABC):
    """Contract for all PDF page-count adapters."""

    @abstractmethod
    def count_pages(self, pdf_bytes: bytes) -> int:
        """Open the PDF, read its page count and release the document.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Total number of pages.

        Raises:
            PdfAnalysisError: if the document cannot be opened or read.
        """

from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text-layer adapters."""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Read the embedded text layer of every page.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One stripped string per page, in page order. Pages without a text
            layer yield an empty string.

        Raises:
            PdfExtractionError: if the document cannot be opened or read.
        """


def join_pages(pages: list[str]) -> str:
    parts = [
        f"=== PAGE {number} ===\n{text}"
        for number, text in enumerate(pages, start=1)
        if text
    ]
    return "\n".join(parts).strip()

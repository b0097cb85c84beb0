class ExtractionError(Exception):
    """Base exception for text extraction errors."""


class TabularReadError(ExtractionError):
    """Raised when a CSV or spreadsheet cannot be parsed."""


class AllExtractionMethodsFailed(ExtractionError):
    """Raised when no strategy produced text that meets the quality bar."""

    def __init__(self, reasons: list[str]) -> None:
        message = (
            "All text extraction methods failed. "
            "The file might be corrupted, password-protected or image-only."
        )
        super().__init__(message)
        self.reasons = list(reasons)

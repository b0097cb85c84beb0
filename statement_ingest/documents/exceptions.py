class DocumentError(Exception):
    """Base exception for all document-related errors."""


class FileValidationError(DocumentError):
    """Raised when an uploaded file cannot enter the pipeline at all."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)

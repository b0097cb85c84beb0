from statement_ingest.documents.models import DocumentType, SourceDocument

_SUPPORTED = ", ".join(t.value for t in DocumentType)


class FileValidator:
    """Rejects unusable inputs before any extraction work begins."""

    def __init__(self, max_size_bytes: int) -> None:
        self._max_size_bytes = max_size_bytes

    def validate(self, document: SourceDocument) -> list[str]:
        """Return validation error messages; an empty list means the file passes."""
        errors: list[str] = []
        if document.size_bytes > self._max_size_bytes:
            limit_mb = self._max_size_bytes / (1024 * 1024)
            errors.append(f"File size exceeds {limit_mb:g}MB limit")
        if document.document_type is None:
            errors.append(
                f"Unsupported file type '{document.declared_type}'. "
                f"Supported types: {_SUPPORTED}"
            )
        if document.size_bytes <= 0:
            errors.append("File is empty")
        return errors

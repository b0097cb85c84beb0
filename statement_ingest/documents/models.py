from dataclasses import dataclass, field
from enum import Enum


class DocumentType(str, Enum):
    """Input formats the pipeline accepts."""

    PDF = "pdf"
    CSV = "csv"
    SPREADSHEET = "spreadsheet"

    @classmethod
    def from_declared(cls, declared: str) -> "DocumentType | None":
        """Map a declared extension, alias or MIME type onto a DocumentType.

        Returns None when the declared value is not a supported format.
        """
        key = declared.strip().lower().lstrip(".")
        return _DECLARED_ALIASES.get(key)

    @property
    def is_tabular(self) -> bool:
        return self in (DocumentType.CSV, DocumentType.SPREADSHEET)


_DECLARED_ALIASES: dict[str, DocumentType] = {
    "pdf": DocumentType.PDF,
    "application/pdf": DocumentType.PDF,
    "csv": DocumentType.CSV,
    "text/csv": DocumentType.CSV,
    "spreadsheet": DocumentType.SPREADSHEET,
    "excel": DocumentType.SPREADSHEET,
    "xlsx": DocumentType.SPREADSHEET,
    "xls": DocumentType.SPREADSHEET,
    "application/vnd.ms-excel": DocumentType.SPREADSHEET,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": (
        DocumentType.SPREADSHEET
    ),
}


@dataclass(frozen=True)
class SourceDocument:
    """An uploaded statement file as handed over by the upload handler."""

    data: bytes = field(repr=False)
    filename: str
    declared_type: str
    size_bytes: int

    @classmethod
    def from_bytes(cls, data: bytes, filename: str, declared_type: str) -> "SourceDocument":
        return cls(
            data=data,
            filename=filename,
            declared_type=declared_type,
            size_bytes=len(data),
        )

    @property
    def document_type(self) -> DocumentType | None:
        return DocumentType.from_declared(self.declared_type)

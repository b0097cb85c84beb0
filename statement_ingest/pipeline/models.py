from dataclasses import dataclass, field
from typing import Any

from statement_ingest.transactions.models import AIAnalysis, Transaction

SUPPORTED_LANGUAGES = ("auto", "it", "en")


@dataclass(frozen=True)
class PipelineOptions:
    """Per-call switches that override configured defaults."""

    enable_ocr: bool = True
    enable_ai: bool = True
    language: str = "auto"
    include_analysis: bool = True
    force_ocr: bool = False

    def __post_init__(self) -> None:
        if self.language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language '{self.language}'. Choose from: {list(SUPPORTED_LANGUAGES)}"
            )


@dataclass(frozen=True)
class PipelineMetadata:
    file_name: str
    file_type: str
    file_size: int
    page_count: int = 0
    processing_time_ms: int = 0
    confidence: float = 0.0
    method: str = ""
    language: str = "unknown"
    bank_detected: str = "Unknown"
    transaction_source: str = ""
    ocr_retry_recommended: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "fileType": self.file_type,
            "fileSize": self.file_size,
            "pageCount": self.page_count,
            "processingTime": self.processing_time_ms,
            "confidence": self.confidence,
            "method": self.method,
            "language": self.language,
            "bankDetected": self.bank_detected,
            "transactionSource": self.transaction_source,
            "ocrRetryRecommended": self.ocr_retry_recommended,
        }


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one pipeline run, handed to the upload caller."""

    success: bool
    metadata: PipelineMetadata
    transactions: tuple[Transaction, ...] = ()
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    raw_text: str = field(default="", repr=False)
    ai_analysis: AIAnalysis | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view with camelCase keys and amounts as strings."""
        payload: dict[str, Any] = {
            "success": self.success,
            "transactions": [transaction.to_dict() for transaction in self.transactions],
            "metadata": self.metadata.to_dict(),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "rawText": self.raw_text,
        }
        if self.ai_analysis is not None:
            payload["aiAnalysis"] = self.ai_analysis.to_dict()
        return payload

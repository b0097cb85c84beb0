from statement_ingest.documents.models import SourceDocument
from statement_ingest.extraction.base import BaseTextStrategy
from statement_ingest.extraction.models import (
    ChainRun,
    ExtractionAttempt,
    ExtractionFailure,
    ExtractionMethod,
    ExtractionOutcome,
)
from statement_ingest.extraction.quality import calculate_text_confidence, detect_language


class HybridMerger:
    """Combines text-layer and OCR output when neither is good enough alone."""

    DOMINANCE_RATIO = 1.5
    OCR_SUPPLEMENT_LABEL = "[OCR Supplement]"
    NATIVE_SUPPLEMENT_LABEL = "[Text Layer Supplement]"

    def merge(self, native_text: str, ocr_text: str) -> str:
        native_text = native_text.strip()
        ocr_text = ocr_text.strip()
        if not ocr_text:
            return native_text
        if not native_text:
            return ocr_text
        if len(native_text) >= len(ocr_text) * self.DOMINANCE_RATIO:
            return f"{native_text}\n\n{self.OCR_SUPPLEMENT_LABEL}\n{ocr_text}"
        if len(ocr_text) >= len(native_text) * self.DOMINANCE_RATIO:
            return f"{ocr_text}\n\n{self.NATIVE_SUPPLEMENT_LABEL}\n{native_text}"
        return f"{native_text}\n\n{ocr_text}"


class HybridStrategy(BaseTextStrategy):
    """Merges whatever the native and OCR strategies produced in this run."""

    method = ExtractionMethod.HYBRID

    def __init__(self, merger: HybridMerger, min_text_length: int) -> None:
        super().__init__(min_text_length)
        self._merger = merger

    async def attempt(self, document: SourceDocument, run: ChainRun) -> ExtractionOutcome:
        native = run.outcome_for(ExtractionMethod.NATIVE)
        ocr = run.outcome_for(ExtractionMethod.OCR)
        native_text = native.text if native is not None else ""
        ocr_text = ocr.text if ocr is not None else ""

        merged = self._merger.merge(native_text, ocr_text)
        page_count = max(
            native.page_count if native is not None else 0,
            ocr.page_count if ocr is not None else 0,
        )
        if len(merged) < self._min_text_length:
            return ExtractionFailure(
                method=self.method,
                reason=f"Combined text too short: {len(merged)} chars",
                text=merged,
                page_count=page_count,
            )
        confidence = max(
            calculate_text_confidence(native_text) if native_text else 0.0,
            ocr.confidence if ocr is not None else 0.0,
        )
        return ExtractionAttempt(
            method=self.method,
            text=merged,
            page_count=page_count,
            confidence=confidence,
            language=detect_language(merged),
            table=native.table if isinstance(native, ExtractionAttempt) else None,
        )

import asyncio

from statement_ingest.documents.models import DocumentType, SourceDocument
from statement_ingest.extraction.base import BaseTextStrategy
from statement_ingest.extraction.exceptions import TabularReadError
from statement_ingest.extraction.models import (
    ChainRun,
    ExtractionAttempt,
    ExtractionFailure,
    ExtractionMethod,
    ExtractionOutcome,
)
from statement_ingest.extraction.quality import (
    calculate_text_confidence,
    detect_language,
    is_text_quality_good,
)
from statement_ingest.extraction.tabular import read_table, render_table
from statement_ingest.pdf.base import BasePdfExtractor, join_pages
from statement_ingest.pdf.exceptions import PdfExtractionError


class NativeTextStrategy(BaseTextStrategy):
    """Reads text the file already carries: a PDF text layer or tabular cells."""

    method = ExtractionMethod.NATIVE

    def __init__(self, pdf_extractor: BasePdfExtractor, min_text_length: int) -> None:
        super().__init__(min_text_length)
        self._pdf_extractor = pdf_extractor

    async def attempt(self, document: SourceDocument, run: ChainRun) -> ExtractionOutcome:
        document_type = document.document_type
        if document_type is DocumentType.PDF:
            if run.force_ocr and run.enable_ocr:
                return ExtractionFailure(
                    method=self.method, reason="Text layer skipped, OCR requested"
                )
            return await self._attempt_pdf(document)
        if document_type is not None and document_type.is_tabular:
            return await self._attempt_tabular(document, document_type)
        return ExtractionFailure(
            method=self.method,
            reason=f"No native reader for '{document.declared_type}'",
        )

    async def _attempt_pdf(self, document: SourceDocument) -> ExtractionOutcome:
        try:
            pages = await asyncio.to_thread(self._pdf_extractor.extract_pages, document.data)
        except PdfExtractionError as exc:
            return ExtractionFailure(method=self.method, reason=str(exc))

        text = join_pages(pages)
        confidence = calculate_text_confidence(text)
        if len(text) < self._min_text_length:
            return ExtractionFailure(
                method=self.method,
                reason=f"Text layer too short: {len(text)} chars",
                text=text,
                page_count=len(pages),
                confidence=confidence,
            )
        if not is_text_quality_good(text):
            return ExtractionFailure(
                method=self.method,
                reason="Text layer looks corrupted",
                text=text,
                page_count=len(pages),
                confidence=confidence,
            )
        return ExtractionAttempt(
            method=self.method,
            text=text,
            page_count=len(pages),
            confidence=confidence,
            language=detect_language(text),
        )

    async def _attempt_tabular(
        self, document: SourceDocument, document_type: DocumentType
    ) -> ExtractionOutcome:
        try:
            table = await asyncio.to_thread(read_table, document.data, document_type)
        except TabularReadError as exc:
            return ExtractionFailure(method=self.method, reason=str(exc))

        text = render_table(table)
        confidence = calculate_text_confidence(text)
        if len(table) < 2:
            return ExtractionFailure(
                method=self.method,
                reason=f"{document_type.value} file has no data rows",
                text=text,
                page_count=1,
                confidence=confidence,
            )
        if not is_text_quality_good(text):
            return ExtractionFailure(
                method=self.method,
                reason=f"{document_type.value} content looks corrupted",
                text=text,
                page_count=1,
                confidence=confidence,
            )
        return ExtractionAttempt(
            method=self.method,
            text=text,
            page_count=1,
            confidence=confidence,
            language=detect_language(text),
            table=table,
        )

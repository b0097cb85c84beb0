import asyncio
import threading
from collections.abc import Callable

from statement_ingest.documents.models import DocumentType, SourceDocument
from statement_ingest.extraction.base import BaseTextStrategy
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
    ocr_language_hint,
)
from statement_ingest.logging.logger import Log
from statement_ingest.ocr.base import BaseOcrEngine
from statement_ingest.ocr.exceptions import OcrError
from statement_ingest.ocr.models import OcrDocument
from statement_ingest.ocr.rasterizer import iter_pdf_pages


class OcrStrategy(BaseTextStrategy):
    """Rasterizes PDF pages and recognizes them in a worker thread."""

    method = ExtractionMethod.OCR

    def __init__(
        self,
        engine: BaseOcrEngine,
        min_text_length: int,
        *,
        dpi: int,
        timeout_seconds: float,
    ) -> None:
        super().__init__(min_text_length)
        self._engine = engine
        self._dpi = dpi
        self._timeout_seconds = timeout_seconds

    async def attempt(self, document: SourceDocument, run: ChainRun) -> ExtractionOutcome:
        if not run.enable_ocr:
            return ExtractionFailure(method=self.method, reason="OCR disabled")
        if document.document_type is not DocumentType.PDF:
            return ExtractionFailure(
                method=self.method, reason="OCR only applies to PDF documents"
            )

        languages = ocr_language_hint(run.language)
        cancelled = threading.Event()
        on_page = self._thread_safe_progress(run, cancelled)
        Log.info(f"Running OCR with languages '{languages}'", dpi=self._dpi)
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(
                    self._recognize, document.data, languages, on_page, cancelled
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            return ExtractionFailure(
                method=self.method,
                reason=f"OCR timed out after {self._timeout_seconds:g}s",
                timed_out=True,
            )
        except OcrError as exc:
            return ExtractionFailure(method=self.method, reason=str(exc))
        finally:
            cancelled.set()

        text = result.text
        confidence = (calculate_text_confidence(text) + result.confidence / 100) / 2
        if len(text) < self._min_text_length:
            return ExtractionFailure(
                method=self.method,
                reason=f"OCR produced too little text: {len(text)} chars",
                text=text,
                page_count=result.page_count,
                confidence=confidence,
            )
        return ExtractionAttempt(
            method=self.method,
            text=text,
            page_count=result.page_count,
            confidence=min(1.0, confidence),
            language=detect_language(text),
        )

    def _recognize(
        self,
        pdf_bytes: bytes,
        languages: str,
        on_page: Callable[[int, int], None],
        cancelled: threading.Event,
    ) -> OcrDocument:
        pages = []
        for number, total, image in iter_pdf_pages(pdf_bytes, self._dpi):
            if cancelled.is_set():
                Log.debug(f"OCR abandoned before page {number}/{total}")
                break
            pages.append(self._engine.recognize(image, languages))
            on_page(number, total)
        return OcrDocument(pages=pages)

    @staticmethod
    def _thread_safe_progress(
        run: ChainRun, cancelled: threading.Event
    ) -> Callable[[int, int], None]:
        """Page callback for the worker thread; silent once the attempt is over."""
        callback = run.on_ocr_page
        if callback is None:
            return lambda _done, _total: None
        loop = asyncio.get_running_loop()

        def deliver(done: int, total: int) -> None:
            if not cancelled.is_set():
                callback(done, total)

        def on_page(done: int, total: int) -> None:
            if not cancelled.is_set():
                loop.call_soon_threadsafe(deliver, done, total)

        return on_page

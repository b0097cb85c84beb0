import asyncio
import time
import uuid
from collections.abc import Sequence

from statement_ingest.classification.classifier import DocumentClassifier
from statement_ingest.classification.models import DetectionResult
from statement_ingest.completion.client_base import BaseCompletionClient
from statement_ingest.completion.factory import CompletionClientFactory
from statement_ingest.config.settings import Settings
from statement_ingest.documents.exceptions import FileValidationError
from statement_ingest.documents.models import DocumentType, SourceDocument
from statement_ingest.documents.validator import FileValidator
from statement_ingest.extraction.exceptions import AllExtractionMethodsFailed
from statement_ingest.extraction.factory import TextExtractionChainFactory
from statement_ingest.extraction.models import ExtractionMethod
from statement_ingest.logging.logger import Log
from statement_ingest.ocr.base import BaseOcrEngine
from statement_ingest.pdf.base import BasePdfExtractor
from statement_ingest.pipeline.exceptions import StageTimeout
from statement_ingest.pipeline.models import PipelineMetadata, PipelineOptions, PipelineResult
from statement_ingest.pipeline.pipeline import PipelineContext, PipelineStage, PipelineStep
from statement_ingest.pipeline.progress import ProgressCallback, ProgressReporter
from statement_ingest.pipeline.steps import (
    ClassifyStep,
    ExtractTextStep,
    ExtractTransactionsStep,
    ValidateFileStep,
    ValidateTransactionsStep,
)
from statement_ingest.transactions.ai_extractor import AITransactionExtractor
from statement_ingest.transactions.models import Transaction, ValidationReport
from statement_ingest.transactions.pattern_extractor import PatternTransactionExtractor
from statement_ingest.transactions.tabular_extractor import TabularTransactionExtractor
from statement_ingest.transactions.validator import TransactionValidator

OCR_TIMEOUT_WARNING = (
    "OCR timed out on this scanned statement. Export the statement as CSV from "
    "your online banking and upload that file instead."
)


class PipelineOrchestrator:
    """Runs the statement pipeline: validate, extract text, classify,
    extract transactions, validate transactions.

    `run` never raises. Fatal problems (invalid file, no usable text, pipeline
    timeout, unexpected errors) become `errors`; recoverable ones (AI fallback,
    OCR timeout, low confidence, anomalies) become `warnings`.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        *,
        timeout_seconds: float = 300.0,
        ocr_retry_transaction_threshold: int = 10,
        owned_client: BaseCompletionClient | None = None,
    ) -> None:
        self._steps = list(steps)
        self._timeout_seconds = timeout_seconds
        self._ocr_retry_threshold = ocr_retry_transaction_threshold
        self._owned_client = owned_client

    async def run(
        self,
        document: SourceDocument,
        options: PipelineOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        started = time.monotonic()
        context = PipelineContext(
            document=document,
            options=options or PipelineOptions(),
            run_id=uuid.uuid4().hex[:8],
            progress=ProgressReporter(on_progress),
        )
        Log.info(
            "Pipeline started",
            run_id=context.run_id,
            document=document.filename,
            size=document.size_bytes,
        )

        errors: list[str] = []
        try:
            await asyncio.wait_for(self._run_steps(context), timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            errors.append(str(StageTimeout(context.stage.value, self._timeout_seconds)))
        except FileValidationError as exc:
            errors.extend(exc.errors)
        except AllExtractionMethodsFailed as exc:
            Log.error(f"{exc} Reasons: {'; '.join(exc.reasons)}", run_id=context.run_id)
            errors.append(str(exc))
        except Exception as exc:
            Log.exception("Pipeline failed unexpectedly", run_id=context.run_id)
            errors.append(f"Unexpected processing error: {exc}")

        if errors:
            context.stage = PipelineStage.FAILED
            Log.error(f"Pipeline failed: {'; '.join(errors)}", run_id=context.run_id)
        result = self._build_result(context, errors, started)
        context.progress.finish("Done" if result.success else "Finished with errors")
        Log.info(
            f"Pipeline finished: {len(result.transactions)} transactions",
            run_id=context.run_id,
            success=result.success,
            duration_ms=result.metadata.processing_time_ms,
        )
        return result

    def run_sync(
        self,
        document: SourceDocument,
        options: PipelineOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        """Run the pipeline from synchronous code on a fresh event loop.

        The loop is closed without joining worker threads, so an OCR call
        abandoned on timeout does not hold up the return.
        """
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(self.run(document, options, on_progress))
        finally:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    async def close(self) -> None:
        if self._owned_client is not None:
            await self._owned_client.close()

    async def _run_steps(self, context: PipelineContext) -> None:
        for step in self._steps:
            context.stage = step.stage
            context.progress.report(step.progress_percent, step.label)
            Log.debug(f"Stage {step.stage.value}", run_id=context.run_id)
            context = await step.run(context)
        context.stage = PipelineStage.DONE

    def _build_result(
        self, context: PipelineContext, errors: list[str], started: float
    ) -> PipelineResult:
        document = context.document
        attempt = context.attempt
        report = context.report
        if report is None or errors:
            report = ValidationReport()
        transactions = report.transactions
        detection = context.detection or DetectionResult()
        retry_ocr = not errors and self._should_recommend_ocr(context, transactions)

        document_type = document.document_type
        file_type = document_type.value if document_type is not None else document.declared_type
        metadata = PipelineMetadata(
            file_name=document.filename,
            file_type=file_type,
            file_size=document.size_bytes,
            page_count=attempt.page_count if attempt is not None else 0,
            processing_time_ms=int((time.monotonic() - started) * 1000),
            confidence=report.confidence,
            method=attempt.method.value if attempt is not None else "",
            language=(
                detection.language
                if detection.language_known or attempt is None
                else attempt.language
            ),
            bank_detected=detection.bank,
            transaction_source=(
                context.batch.source.value if context.batch is not None and not errors else ""
            ),
            ocr_retry_recommended=retry_ocr,
        )
        return PipelineResult(
            success=bool(transactions) and not errors,
            metadata=metadata,
            transactions=transactions,
            errors=tuple(errors),
            warnings=tuple(self._collect_warnings(context, errors, report, retry_ocr)),
            raw_text=attempt.text if attempt is not None else "",
            ai_analysis=context.analysis if not errors else None,
        )

    def _should_recommend_ocr(
        self, context: PipelineContext, transactions: tuple[Transaction, ...]
    ) -> bool:
        attempt = context.attempt
        return (
            attempt is not None
            and attempt.method is ExtractionMethod.NATIVE
            and context.document.document_type is DocumentType.PDF
            and len(transactions) < self._ocr_retry_threshold
        )

    def _collect_warnings(
        self,
        context: PipelineContext,
        errors: list[str],
        report: ValidationReport,
        retry_ocr: bool,
    ) -> list[str]:
        warnings: list[str] = []
        extraction = context.extraction
        if extraction is not None and ExtractionMethod.OCR in extraction.timed_out_methods:
            warnings.append(OCR_TIMEOUT_WARNING)
        if errors:
            return warnings

        batch = context.batch
        if context.ai_failure is not None and batch is not None:
            warnings.append(
                f"AI transaction extraction failed ({context.ai_failure.reason}); "
                f"used {batch.source.value} matching instead, please review the results"
            )
        warnings.extend(report.warnings)
        warnings.extend(report.anomalies)
        if not report.transactions:
            warnings.append("No transactions were found in the document")
        if retry_ocr:
            warnings.append(
                f"Only {len(report.transactions)} transactions were found in the PDF text "
                "layer. Retrying with OCR may recover more."
            )
        return warnings


def build_orchestrator(
    settings: Settings,
    *,
    completion_client: BaseCompletionClient | None = None,
    pdf_extractor: BasePdfExtractor | None = None,
    ocr_engine: BaseOcrEngine | None = None,
) -> PipelineOrchestrator:
    """Build a PipelineOrchestrator with all adapters resolved from settings.

    A client passed in stays owned by the caller; one created here is closed
    by `PipelineOrchestrator.close`.
    """
    Log.configure(settings.log_level)
    owned_client = None
    client = completion_client if settings.ai_enabled else None
    if client is None and settings.ai_enabled:
        client = owned_client = CompletionClientFactory.create(settings)

    chain = TextExtractionChainFactory.create(
        settings, pdf_extractor=pdf_extractor, ocr_engine=ocr_engine
    )
    classifier = DocumentClassifier(
        client,
        model=settings.completion_model_name,
        temperature=settings.completion_temperature,
        sample_chars=settings.classification_sample_chars,
        timeout_seconds=settings.completion_timeout_seconds,
    )
    ai_extractor = None
    if client is not None:
        ai_extractor = AITransactionExtractor(
            client,
            model=settings.completion_model_name,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
            timeout_seconds=settings.completion_timeout_seconds,
            empty_is_failure=settings.ai_empty_result_fallback,
        )

    steps: list[PipelineStep] = [
        ValidateFileStep(FileValidator(settings.max_file_size_bytes)),
        ExtractTextStep(chain, ocr_enabled=settings.ocr_enabled),
        ClassifyStep(classifier),
        ExtractTransactionsStep(
            ai_extractor, PatternTransactionExtractor(), TabularTransactionExtractor()
        ),
        ValidateTransactionsStep(
            TransactionValidator(
                low_confidence_threshold=settings.low_confidence_threshold,
                anomaly_amount_factor=settings.anomaly_amount_factor,
            )
        ),
    ]
    return PipelineOrchestrator(
        steps,
        timeout_seconds=settings.pipeline_timeout_seconds,
        ocr_retry_transaction_threshold=settings.ocr_retry_transaction_threshold,
        owned_client=owned_client,
    )

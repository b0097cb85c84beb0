from statement_ingest.classification.classifier import DocumentClassifier
from statement_ingest.classification.models import DetectionResult
from statement_ingest.documents.exceptions import FileValidationError
from statement_ingest.documents.validator import FileValidator
from statement_ingest.extraction.chain import TextExtractionChain
from statement_ingest.extraction.exceptions import AllExtractionMethodsFailed
from statement_ingest.extraction.models import ChainRun, ExtractionAttempt, ExtractionMethod
from statement_ingest.logging.logger import Log
from statement_ingest.pipeline.pipeline import PipelineContext, PipelineStage, PipelineStep
from statement_ingest.transactions.ai_extractor import AITransactionExtractor
from statement_ingest.transactions.analysis import build_analysis
from statement_ingest.transactions.models import (
    AIExtractionFailure,
    TransactionBatch,
    TransactionSource,
)
from statement_ingest.transactions.pattern_extractor import PatternTransactionExtractor
from statement_ingest.transactions.tabular_extractor import TabularTransactionExtractor
from statement_ingest.transactions.validator import TransactionValidator

STRATEGY_PROGRESS: dict[ExtractionMethod, tuple[int, str]] = {
    ExtractionMethod.NATIVE: (15, "Reading document text"),
    ExtractionMethod.OCR: (25, "Running OCR"),
    ExtractionMethod.HYBRID: (65, "Combining text layer and OCR"),
}
OCR_PAGE_PROGRESS_SPAN = 35


class ValidateFileStep(PipelineStep):
    stage = PipelineStage.VALIDATING
    progress_percent = 5
    label = "Validating file"

    def __init__(self, validator: FileValidator) -> None:
        self._validator = validator

    async def run(self, context: PipelineContext) -> PipelineContext:
        errors = self._validator.validate(context.document)
        if errors:
            raise FileValidationError(errors)
        return context


class ExtractTextStep(PipelineStep):
    stage = PipelineStage.EXTRACTING
    progress_percent = 10
    label = "Extracting text"

    def __init__(self, chain: TextExtractionChain, ocr_enabled: bool = True) -> None:
        self._chain = chain
        self._ocr_enabled = ocr_enabled

    async def run(self, context: PipelineContext) -> PipelineContext:
        progress = context.progress

        def on_strategy(method: ExtractionMethod) -> None:
            percent, label = STRATEGY_PROGRESS[method]
            progress.report(percent, label)

        def on_ocr_page(done: int, total: int) -> None:
            base, _ = STRATEGY_PROGRESS[ExtractionMethod.OCR]
            percent = base + OCR_PAGE_PROGRESS_SPAN * done // max(total, 1)
            progress.report(percent, f"Running OCR (page {done}/{total})")

        run = ChainRun(
            enable_ocr=self._ocr_enabled and context.options.enable_ocr,
            force_ocr=context.options.force_ocr,
            language=context.options.language,
            on_strategy=on_strategy,
            on_ocr_page=on_ocr_page,
        )
        context.extraction = await self._chain.run(context.document, run)
        if not context.extraction.succeeded:
            raise AllExtractionMethodsFailed(
                [f"{f.method.value}: {f.reason}" for f in context.extraction.failures]
            )
        return context


class ClassifyStep(PipelineStep):
    stage = PipelineStage.CLASSIFYING
    progress_percent = 70
    label = "Detecting bank and language"

    def __init__(self, classifier: DocumentClassifier) -> None:
        self._classifier = classifier

    async def run(self, context: PipelineContext) -> PipelineContext:
        attempt = _require_attempt(context)
        detection = await self._classifier.classify(
            attempt.text, use_ai=context.options.enable_ai
        )
        if context.options.language != "auto":
            detection = DetectionResult(bank=detection.bank, language=context.options.language)
        context.detection = detection
        Log.info(
            f"Detected bank '{detection.bank}', language '{detection.language}'",
            run_id=context.run_id,
        )
        return context


class ExtractTransactionsStep(PipelineStep):
    """Tabular header mapping first, then the completion service, then line patterns."""

    stage = PipelineStage.EXTRACTING_TRANSACTIONS
    progress_percent = 75
    label = "Extracting transactions"

    def __init__(
        self,
        ai_extractor: AITransactionExtractor | None,
        pattern_extractor: PatternTransactionExtractor,
        tabular_extractor: TabularTransactionExtractor,
    ) -> None:
        self._ai_extractor = ai_extractor
        self._pattern_extractor = pattern_extractor
        self._tabular_extractor = tabular_extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        attempt = _require_attempt(context)

        if attempt.table is not None:
            rows = self._tabular_extractor.extract(attempt.table)
            if rows is not None:
                context.batch = TransactionBatch(tuple(rows), TransactionSource.TABULAR)
                return context

        if self._ai_extractor is not None and context.options.enable_ai:
            outcome = await self._ai_extractor.extract(
                attempt.text, context.detection or DetectionResult()
            )
            if isinstance(outcome, AIExtractionFailure):
                context.ai_failure = outcome
            else:
                context.batch = outcome
                return context

        rows = self._pattern_extractor.extract(attempt.text)
        context.batch = TransactionBatch(tuple(rows), TransactionSource.PATTERN)
        return context


class ValidateTransactionsStep(PipelineStep):
    stage = PipelineStage.VALIDATING_TRANSACTIONS
    progress_percent = 90
    label = "Validating transactions"

    def __init__(self, validator: TransactionValidator) -> None:
        self._validator = validator

    async def run(self, context: PipelineContext) -> PipelineContext:
        candidates = context.batch.transactions if context.batch is not None else ()
        report = self._validator.validate(candidates)
        context.report = report
        Log.info(
            f"Accepted {len(report.transactions)} of {len(candidates)} transactions",
            run_id=context.run_id,
            confidence=round(report.confidence, 2),
        )

        from_ai = context.batch is not None and context.batch.source is TransactionSource.AI
        if context.options.include_analysis and from_ai:
            context.analysis = build_analysis(
                report.transactions,
                context.detection or DetectionResult(),
                report.anomalies,
            )
        return context


def _require_attempt(context: PipelineContext) -> ExtractionAttempt:
    attempt = context.attempt
    if attempt is None:
        raise ValueError("PipelineContext.extraction must succeed before this step")
    return attempt

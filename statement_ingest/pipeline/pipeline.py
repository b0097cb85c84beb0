from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from statement_ingest.classification.models import DetectionResult
from statement_ingest.documents.models import SourceDocument
from statement_ingest.extraction.models import ChainResult, ExtractionAttempt
from statement_ingest.pipeline.models import PipelineOptions
from statement_ingest.pipeline.progress import ProgressReporter
from statement_ingest.transactions.models import (
    AIAnalysis,
    AIExtractionFailure,
    TransactionBatch,
    ValidationReport,
)


class PipelineStage(str, Enum):
    VALIDATING = "validating"
    EXTRACTING = "extracting"
    CLASSIFYING = "classifying"
    EXTRACTING_TRANSACTIONS = "extracting_transactions"
    VALIDATING_TRANSACTIONS = "validating_transactions"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class PipelineContext:
    """Mutable per-run state; never shared between runs."""

    document: SourceDocument
    options: PipelineOptions
    run_id: str
    progress: ProgressReporter = field(default_factory=ProgressReporter)
    stage: PipelineStage = PipelineStage.VALIDATING
    extraction: ChainResult | None = None
    detection: DetectionResult | None = None
    batch: TransactionBatch | None = None
    ai_failure: AIExtractionFailure | None = None
    report: ValidationReport | None = None
    analysis: AIAnalysis | None = None

    @property
    def attempt(self) -> ExtractionAttempt | None:
        return self.extraction.attempt if self.extraction is not None else None


class PipelineStep(ABC):
    stage: PipelineStage
    progress_percent: int
    label: str

    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError

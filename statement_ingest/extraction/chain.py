from collections.abc import Sequence

from statement_ingest.documents.models import SourceDocument
from statement_ingest.extraction.base import BaseTextStrategy
from statement_ingest.extraction.models import (
    ChainResult,
    ChainRun,
    ExtractionAttempt,
    ExtractionFailure,
)
from statement_ingest.logging.logger import Log


class TextExtractionChain:
    """Tries strategies in increasing order of cost until one is acceptable."""

    def __init__(self, strategies: Sequence[BaseTextStrategy]) -> None:
        self._strategies = list(strategies)

    async def run(self, document: SourceDocument, run: ChainRun) -> ChainResult:
        failures: list[ExtractionFailure] = []
        for strategy in self._strategies:
            if run.on_strategy is not None:
                run.on_strategy(strategy.method)
            outcome = await strategy.attempt(document, run)
            run.outcomes.append(outcome)
            if isinstance(outcome, ExtractionAttempt):
                Log.info(
                    f"{outcome.method.value} extraction accepted: "
                    f"{len(outcome.text)} chars, {outcome.page_count} pages",
                    confidence=round(outcome.confidence, 2),
                )
                return ChainResult(attempt=outcome, failures=failures)
            Log.warning(f"{outcome.method.value} extraction failed: {outcome.reason}")
            failures.append(outcome)
        return ChainResult(attempt=None, failures=failures)

from abc import ABC, abstractmethod

from statement_ingest.documents.models import SourceDocument
from statement_ingest.extraction.models import ChainRun, ExtractionMethod, ExtractionOutcome


class BaseTextStrategy(ABC):
    """One way of turning a document into plain text.

    Strategies never raise for expected failures: they return an
    ExtractionFailure so the chain can escalate to the next strategy.
    """

    method: ExtractionMethod

    def __init__(self, min_text_length: int) -> None:
        self._min_text_length = min_text_length

    @abstractmethod
    async def attempt(self, document: SourceDocument, run: ChainRun) -> ExtractionOutcome:
        """Try to extract text from the document."""

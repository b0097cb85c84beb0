from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from statement_ingest.extraction.tabular import Table


class ExtractionMethod(str, Enum):
    NATIVE = "native"
    OCR = "ocr"
    HYBRID = "hybrid"


@dataclass(frozen=True)
class ExtractionAttempt:
    """Text produced by a strategy that met its quality bar."""

    method: ExtractionMethod
    text: str
    page_count: int
    confidence: float
    language: str
    table: Table | None = None


@dataclass(frozen=True)
class ExtractionFailure:
    """A strategy that could not produce acceptable text.

    `text` keeps whatever partial output the strategy produced so later
    strategies (hybrid) can reuse it without repeating the work.
    """

    method: ExtractionMethod
    reason: str
    text: str = ""
    page_count: int = 0
    confidence: float = 0.0
    timed_out: bool = False


ExtractionOutcome = ExtractionAttempt | ExtractionFailure


@dataclass
class ChainRun:
    """Per-document state shared by the strategies of one chain run."""

    enable_ocr: bool = True
    force_ocr: bool = False
    language: str = "auto"
    outcomes: list[ExtractionOutcome] = field(default_factory=list)
    on_strategy: Callable[[ExtractionMethod], None] | None = None
    on_ocr_page: Callable[[int, int], None] | None = None

    def outcome_for(self, method: ExtractionMethod) -> ExtractionOutcome | None:
        for outcome in self.outcomes:
            if outcome.method is method:
                return outcome
        return None


@dataclass(frozen=True)
class ChainResult:
    """Winning attempt, if any, plus every failure seen along the way."""

    attempt: ExtractionAttempt | None
    failures: list[ExtractionFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.attempt is not None

    @property
    def timed_out_methods(self) -> list[ExtractionMethod]:
        return [failure.method for failure in self.failures if failure.timed_out]

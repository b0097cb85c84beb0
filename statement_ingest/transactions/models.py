from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Healthcare",
    "Bills & Utilities",
    "Income",
    "Investments",
    "Other",
)
DEFAULT_CATEGORY = "Other"


class TransactionSource(str, Enum):
    """Which extractor produced the candidate list."""

    AI = "ai"
    PATTERN = "pattern"
    TABULAR = "tabular"


class AIFailureKind(str, Enum):
    NETWORK = "network"
    MALFORMED = "malformed"
    TIMEOUT = "timeout"
    EMPTY = "empty"


@dataclass(frozen=True)
class Transaction:
    """A structured transaction candidate.

    `date` is an ISO `YYYY-MM-DD` string and a negative `amount` is a debit.
    """

    date: str
    description: str
    amount: Decimal
    category: str = DEFAULT_CATEGORY
    payee: str = ""
    merchant: str = ""
    location: str = ""
    confidence: float = 0.0
    tags: tuple[str, ...] = ()
    raw_source_line: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "description": self.description,
            "amount": str(self.amount),
            "category": self.category,
            "payee": self.payee,
            "merchant": self.merchant,
            "location": self.location,
            "confidence": self.confidence,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class TransactionBatch:
    """Candidates produced by one extractor, before validation."""

    transactions: tuple[Transaction, ...]
    source: TransactionSource


@dataclass(frozen=True)
class AIExtractionFailure:
    kind: AIFailureKind
    reason: str


@dataclass(frozen=True)
class Categorization:
    category: str
    confidence: float
    reasoning: str


@dataclass(frozen=True)
class ValidationReport:
    """Accepted transactions plus the annotations computed over them."""

    transactions: tuple[Transaction, ...] = ()
    confidence: float = 0.0
    rejected_count: int = 0
    anomalies: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class AIAnalysis:
    """Narrative summary attached to AI-extracted results."""

    summary: str = ""
    insights: tuple[str, ...] = ()
    anomalies: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "insights": list(self.insights),
            "anomalies": list(self.anomalies),
        }

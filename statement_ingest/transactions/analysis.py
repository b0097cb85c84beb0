from collections import Counter
from collections.abc import Sequence
from decimal import Decimal

from statement_ingest.classification.models import DetectionResult
from statement_ingest.transactions.models import AIAnalysis, Transaction


def build_analysis(
    transactions: Sequence[Transaction],
    detection: DetectionResult,
    anomalies: Sequence[str] = (),
) -> AIAnalysis:
    """Summarize accepted transactions: totals, top category, average and confidence."""
    if not transactions:
        return AIAnalysis(summary="No transactions found")

    expenses = sum((-t.amount for t in transactions if t.amount < 0), Decimal("0"))
    income = sum((t.amount for t in transactions if t.amount > 0), Decimal("0"))
    count = len(transactions)
    top_category, _ = Counter(t.category for t in transactions).most_common(1)[0]
    average = (expenses + income) / count
    mean_confidence = sum(t.confidence for t in transactions) / count

    return AIAnalysis(
        summary=(
            f"Found {count} transactions from {detection.bank}. "
            f"Total expenses: €{expenses:.2f}, Total income: €{income:.2f}"
        ),
        insights=(
            f"Top category: {top_category}",
            f"Average transaction: €{average:.2f}",
            f"Transaction confidence: {mean_confidence:.0%}",
        ),
        anomalies=tuple(anomalies),
    )

from collections import Counter
from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from statement_ingest.logging.logger import Log
from statement_ingest.transactions.models import Transaction, ValidationReport
from statement_ingest.transactions.normalizers import normalize_date


class TransactionValidator:
    """Turns a raw candidate list into the accepted, sorted transaction list.

    Candidates with a zero amount, an empty description or an unparsable date
    are dropped. Duplicates and outsized amounts are only reported.
    """

    def __init__(
        self,
        low_confidence_threshold: float = 0.5,
        anomaly_amount_factor: float = 5.0,
    ) -> None:
        self._low_confidence_threshold = low_confidence_threshold
        self._anomaly_amount_factor = Decimal(str(anomaly_amount_factor))

    def validate(self, candidates: Sequence[Transaction]) -> ValidationReport:
        accepted = [
            transaction
            for transaction in (self._accept(candidate) for candidate in candidates)
            if transaction is not None
        ]
        accepted.sort(key=lambda transaction: transaction.date)
        rejected = len(candidates) - len(accepted)
        if rejected:
            Log.info(f"Discarded {rejected} incomplete transaction candidates")

        return ValidationReport(
            transactions=tuple(accepted),
            confidence=self._confidence(accepted, len(candidates)),
            rejected_count=rejected,
            anomalies=tuple(self._anomalies(accepted)),
            warnings=tuple(self._warnings(accepted)),
        )

    @staticmethod
    def _accept(candidate: Transaction) -> Transaction | None:
        description = candidate.description.strip()
        if not description or candidate.amount == 0:
            return None
        try:
            iso_date = normalize_date(candidate.date)
        except ValueError:
            return None
        if iso_date == candidate.date and description == candidate.description:
            return candidate
        return replace(candidate, date=iso_date, description=description)

    @staticmethod
    def _confidence(accepted: list[Transaction], candidate_count: int) -> float:
        if not accepted or candidate_count == 0:
            return 0.0
        mean_confidence = sum(t.confidence for t in accepted) / len(accepted)
        completeness = len(accepted) / candidate_count
        return max(0.0, min(1.0, (mean_confidence + completeness) / 2))

    def _anomalies(self, accepted: list[Transaction]) -> list[str]:
        anomalies = []
        descriptions = Counter(t.description.lower() for t in accepted)
        for description, count in descriptions.items():
            if count > 1:
                anomalies.append(
                    f"Possible duplicate: '{description}' appears {count} times"
                )

        if accepted:
            amounts = [abs(t.amount) for t in accepted]
            limit = sum(amounts) / len(amounts) * self._anomaly_amount_factor
            high = sum(1 for amount in amounts if amount > limit)
            if high:
                anomalies.append(
                    f"Found {high} unusually high amount transactions "
                    f"(over {float(self._anomaly_amount_factor):g}x the average)"
                )
        return anomalies

    def _warnings(self, accepted: list[Transaction]) -> list[str]:
        low = sum(1 for t in accepted if t.confidence < self._low_confidence_threshold)
        if not low:
            return []
        return [
            f"{low} transactions have low confidence "
            f"(below {self._low_confidence_threshold:.0%}) and should be reviewed"
        ]

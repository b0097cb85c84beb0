"""Validates the parsed AI transaction array and builds candidates from it."""

from decimal import Decimal, InvalidOperation
from typing import Any

from statement_ingest.completion.exceptions import AIResponseMalformed
from statement_ingest.transactions.categorizer import extract_payee, match_merchant
from statement_ingest.transactions.models import CATEGORIES, DEFAULT_CATEGORY, Transaction
from statement_ingest.transactions.normalizers import normalize_date

_MAX_TRANSACTIONS = 5000
_DEFAULT_CONFIDENCE = 0.7


def build_transactions(data: Any) -> list[Transaction]:
    """Validate the decoded JSON array and build transaction candidates.

    Structural problems reject the whole response. Dates that cannot be
    normalized are kept verbatim so the transaction validator drops them.

    Raises:
        AIResponseMalformed: on any structural violation.
    """
    if not isinstance(data, list):
        raise AIResponseMalformed("Transaction list must be a JSON array")
    if len(data) > _MAX_TRANSACTIONS:
        raise AIResponseMalformed(f"Too many transactions: {len(data)} (max {_MAX_TRANSACTIONS})")
    return [_build_transaction(item, index) for index, item in enumerate(data)]


def _build_transaction(raw: Any, index: int) -> Transaction:
    if not isinstance(raw, dict):
        raise AIResponseMalformed(f"Transaction at index {index} must be an object")
    date = raw.get("date")
    if not isinstance(date, str):
        raise AIResponseMalformed(f"Transaction at index {index}: 'date' must be a string")
    description = raw.get("description")
    if not isinstance(description, str):
        raise AIResponseMalformed(
            f"Transaction at index {index}: 'description' must be a string"
        )
    description = description.strip()
    payee = raw.get("payee")
    if payee is not None and not isinstance(payee, str):
        raise AIResponseMalformed(f"Transaction at index {index}: 'payee' must be a string")

    return Transaction(
        date=_build_date(date),
        description=description,
        amount=_build_amount(raw.get("amount"), index),
        category=_build_category(raw.get("category")),
        payee=(payee or "").strip() or extract_payee(description),
        merchant=match_merchant(description),
        location=raw.get("location") if isinstance(raw.get("location"), str) else "",
        confidence=_build_confidence(raw.get("confidence"), index),
        tags=_build_tags(raw.get("tags"), index),
        raw_source_line=description,
    )


def _build_date(raw: str) -> str:
    try:
        return normalize_date(raw)
    except ValueError:
        return raw


def _build_amount(raw: Any, index: int) -> Decimal:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise AIResponseMalformed(f"Transaction at index {index}: 'amount' must be a number")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise AIResponseMalformed(
            f"Transaction at index {index}: 'amount' must be a number, got {raw!r}"
        ) from exc
    if not amount.is_finite():
        raise AIResponseMalformed(f"Transaction at index {index}: 'amount' must be finite")
    return amount.quantize(Decimal("0.01"))


def _build_category(raw: Any) -> str:
    if isinstance(raw, str) and raw in CATEGORIES:
        return raw
    return DEFAULT_CATEGORY


def _build_confidence(raw: Any, index: int) -> float:
    if raw is None:
        return _DEFAULT_CONFIDENCE
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AIResponseMalformed(
            f"Transaction at index {index}: 'confidence' must be a number or null"
        )
    return max(0.0, min(1.0, float(raw)))


def _build_tags(raw: Any, index: int) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list) or not all(isinstance(tag, str) for tag in raw):
        raise AIResponseMalformed(
            f"Transaction at index {index}: 'tags' must be a list of strings"
        )
    return tuple(raw)

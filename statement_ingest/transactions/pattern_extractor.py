"""Deterministic line-pattern extraction of transactions from statement text."""

import re

from statement_ingest.logging.logger import Log
from statement_ingest.transactions.categorizer import categorize, extract_payee, match_merchant
from statement_ingest.transactions.models import Transaction
from statement_ingest.transactions.normalizers import MONTHS, normalize_amount, normalize_date

MIN_LINE_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 150

_SINGLE_LINE_MAX_LINES = 20
_SINGLE_LINE_MIN_CHARS = 5000
_LONG_LINE_CHARS = 500

_MONTH = "|".join(sorted(MONTHS))
_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?<!\d)\d{4}[-/.]\d{1,2}[-/.]\d{1,2}(?!\d)"),
    re.compile(r"(?<!\d)\d{1,2}[-/.]\d{1,2}[-/.](?:\d{4}|\d{2})(?!\d)"),
    re.compile(
        rf"(?<!\d)\d{{1,2}}[\s-]+(?:{_MONTH})[^\W\d_]*\.?[\s-]+\d{{4}}(?!\d)", re.IGNORECASE
    ),
)

_CURRENCY = r"(?:[€$£]|EUR|USD|GBP|CHF)"
_NUMBER = r"(?:\d{1,3}(?:[.,']\d{3})+|\d+)[.,]\d{2}"
_AMOUNT_RE = re.compile(
    rf"(?<![\w.,])"
    rf"(?:\(\s?{_CURRENCY}?\s?{_NUMBER}\s?{_CURRENCY}?\s?\)"
    rf"|[-+−]?\s?(?:{_CURRENCY}\s?)?[-+−]?{_NUMBER}(?!\d)(?:\s?{_CURRENCY}(?![a-z]))?-?)",
    re.IGNORECASE,
)
_DESCRIPTION_NOISE_RE = re.compile(r"[|]+|\s{2,}")
_DESCRIPTION_EDGES = " \t-:;,|*"


class PatternTransactionExtractor:
    """Scans text line by line for a date and an amount on the same line.

    Pure and deterministic: the same text always yields the same list.
    """

    def extract(self, text: str) -> list[Transaction]:
        transactions: list[Transaction] = []
        for line in self._split_lines(text):
            transaction = self._parse_line(line.strip())
            if transaction is not None:
                transactions.append(transaction)
        Log.info(f"Pattern extraction found {len(transactions)} transactions")
        return transactions

    @classmethod
    def _split_lines(cls, text: str) -> list[str]:
        lines = text.splitlines()
        if len(lines) >= _SINGLE_LINE_MAX_LINES or len(text) <= _SINGLE_LINE_MIN_CHARS:
            return lines
        Log.debug("Single-line statement layout detected, splitting on dates")
        split: list[str] = []
        for line in lines:
            split.extend(cls._split_on_dates(line) if len(line) > _LONG_LINE_CHARS else [line])
        return split

    @staticmethod
    def _split_on_dates(line: str) -> list[str]:
        starts = sorted(
            {match.start() for pattern in _DATE_PATTERNS for match in pattern.finditer(line)}
        )
        if not starts:
            return [line]
        bounds = starts if starts[0] == 0 else [0, *starts]
        ends = [*bounds[1:], len(line)]
        return [line[start:end] for start, end in zip(bounds, ends)]

    def _parse_line(self, line: str) -> Transaction | None:
        if len(line) <= MIN_LINE_LENGTH:
            return None
        found = self._find_date(line)
        if found is None:
            return None
        date_text, iso_date = found
        remainder = line.replace(date_text, " ", 1)
        amounts = [match.group(0) for match in _AMOUNT_RE.finditer(remainder)]
        if not amounts:
            return None
        try:
            amount = normalize_amount(amounts[0], line)
        except ValueError:
            return None

        description = self._clean_description(remainder, amounts)
        if not description:
            return None
        categorization = categorize(description, amount)
        return Transaction(
            date=iso_date,
            description=description,
            amount=amount,
            category=categorization.category,
            payee=extract_payee(description),
            merchant=match_merchant(description),
            confidence=categorization.confidence,
            raw_source_line=line,
        )

    @staticmethod
    def _find_date(line: str) -> tuple[str, str] | None:
        candidates = sorted(
            (match.start(), match.group(0))
            for pattern in _DATE_PATTERNS
            for match in pattern.finditer(line)
        )
        for _, date_text in candidates:
            try:
                return date_text, normalize_date(date_text)
            except ValueError:
                continue
        return None

    @staticmethod
    def _clean_description(remainder: str, amounts: list[str]) -> str:
        for amount in amounts:
            remainder = remainder.replace(amount, " ", 1)
        description = _DESCRIPTION_NOISE_RE.sub(" ", remainder).strip(_DESCRIPTION_EDGES)
        return description[:MAX_DESCRIPTION_LENGTH].strip()

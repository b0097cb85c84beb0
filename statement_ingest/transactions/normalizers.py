"""Pure date and amount normalization.

Both functions raise `ValueError` on input they cannot interpret; callers
decide whether that drops a line or rejects a whole response.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation

MONTHS: dict[str, int] = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
    "gen": 1, "mag": 5, "giu": 6, "lug": 7, "ago": 8, "set": 9, "ott": 10, "dic": 12,
}

_NUMERIC_DATE_RE = re.compile(
    r"(\d{1,4})[-/.](\d{1,2})[-/.](\d{1,4})(?:[T ]\d{1,2}:\d{2}(?::\d{2})?\S*)?"
)
_DAY_FIRST_NAMED_RE = re.compile(r"(\d{1,2})\s*[-\s]\s*([^\W\d_]{3,})\.?,?\s*[-\s]\s*(\d{2}|\d{4})")
_MONTH_FIRST_NAMED_RE = re.compile(r"([^\W\d_]{3,})\.?\s+(\d{1,2}),?\s+(\d{4})")

_CURRENCY_RE = re.compile(r"[€$£]|\b(?:EUR|USD|GBP|CHF)\b", re.IGNORECASE)
_PLAIN_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_CREDIT_CONTEXT_RE = re.compile(
    r"\b(?:pagamento da|bonifico da|accredito|stipendio|rimborso|salary|refund|deposit)\b",
    re.IGNORECASE,
)
_DEBIT_CONTEXT_RE = re.compile(
    r"\b(?:payment|withdrawal|purchase|debit|fee|charge|pagamento|prelievo|addebito|"
    r"acquisto|commissione|spesa)\b",
    re.IGNORECASE,
)
_CENTS = Decimal("0.01")


def normalize_date(raw: str) -> str:
    """Convert a statement date into an ISO `YYYY-MM-DD` string.

    Field order follows the four-digit group (`2024-03-15` is year first,
    `15/03/2024` day first). A day-first date whose middle field exceeds 12
    is read month-first. Two-digit years become `20YY`.
    """
    value = raw.strip()
    numeric = _NUMERIC_DATE_RE.fullmatch(value)
    if numeric:
        year, month, day = _order_numeric_fields(*numeric.groups(), raw=raw)
    else:
        year, month, day = _parse_named_date(value, raw)
    try:
        return date(year, month, day).isoformat()
    except ValueError as exc:
        raise ValueError(f"Invalid calendar date: {raw!r}") from exc


def normalize_amount(raw: str, context: str = "") -> Decimal:
    """Convert a printed amount into a signed Decimal rounded to cents.

    Parentheses and a leading or trailing minus mark a debit. Without an
    explicit sign, debit keywords in `context` (usually the whole line) make
    the amount negative.
    """
    value = raw.strip()
    negative = False
    explicit_sign = False
    if value.startswith("(") and value.endswith(")"):
        negative = explicit_sign = True
        value = value[1:-1]
    value = _CURRENCY_RE.sub("", value).replace("−", "-")
    value = re.sub(r"[\s']", "", value)
    if value.startswith("-") or value.endswith("-"):
        negative = explicit_sign = True
        value = value.strip("-")
    elif value.startswith("+"):
        explicit_sign = True
        value = value[1:]

    value = _to_plain_number(value)
    if not _PLAIN_NUMBER_RE.fullmatch(value):
        raise ValueError(f"Unrecognized amount: {raw!r}")
    try:
        amount = Decimal(value).quantize(_CENTS)
    except InvalidOperation as exc:
        raise ValueError(f"Unrecognized amount: {raw!r}") from exc

    if not explicit_sign and is_debit_context(context):
        negative = True
    return -amount if negative else amount


def is_debit_context(text: str) -> bool:
    if not text or _CREDIT_CONTEXT_RE.search(text):
        return False
    return _DEBIT_CONTEXT_RE.search(text) is not None


def month_number(name: str) -> int | None:
    return MONTHS.get(name.lower()[:3])


def _order_numeric_fields(first: str, second: str, third: str, *, raw: str) -> tuple[int, int, int]:
    if len(first) == 4:
        return int(first), int(second), int(third)
    if len(third) not in (2, 4) or len(first) > 2:
        raise ValueError(f"Unrecognized date: {raw!r}")
    day, month = int(first), int(second)
    if month > 12 >= day:
        day, month = month, day
    return _expand_year(third), month, day


def _parse_named_date(value: str, raw: str) -> tuple[int, int, int]:
    match = _DAY_FIRST_NAMED_RE.fullmatch(value)
    if match:
        day, name, year = match.groups()
    else:
        match = _MONTH_FIRST_NAMED_RE.fullmatch(value)
        if match is None:
            raise ValueError(f"Unrecognized date: {raw!r}")
        name, day, year = match.groups()
    month = month_number(name)
    if month is None:
        raise ValueError(f"Unknown month name in date: {raw!r}")
    return _expand_year(year), month, int(day)


def _expand_year(year: str) -> int:
    return 2000 + int(year) if len(year) == 2 else int(year)


def _to_plain_number(value: str) -> str:
    if "," in value and "." in value:
        decimal_sep = "," if value.rfind(",") > value.rfind(".") else "."
        thousands_sep = "." if decimal_sep == "," else ","
        return value.replace(thousands_sep, "").replace(decimal_sep, ".")
    for separator in (",", "."):
        if separator not in value:
            continue
        groups = value.split(separator)
        if len(groups) > 2 or len(groups[-1]) == 3:
            return "".join(groups)
        return value.replace(separator, ".")
    return value

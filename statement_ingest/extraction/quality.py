"""Heuristics that judge extracted text before any parsing happens."""

import re

_NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_READABLE_RE = re.compile(r"[^\W_]|\s")
_FINANCIAL_KEYWORDS_RE = re.compile(
    r"banca|bank|conto|account|saldo|movimento|transazione|transaction|"
    r"balance|statement|estratto",
    re.IGNORECASE,
)
_DATE_RE = re.compile(r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}|\d{4}-\d{2}-\d{2}")
_AMOUNT_RE = re.compile(r"\d+[,.]\d{2}\b")

_LANGUAGE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "it": (
        "conto", "bonifico", "addebito", "accredito", "saldo", "valuta",
        "movimento", "estratto", "pagamento", "banca",
    ),
    "en": (
        "account", "transfer", "debit", "credit", "balance", "currency",
        "statement", "payment", "transaction", "bank",
    ),
}

_OCR_LANGUAGE_HINTS = {"it": "ita", "en": "eng"}
_OCR_AUTO_HINT = "eng+ita"

MAX_NON_PRINTABLE_RATIO = 0.1
MIN_READABLE_RATIO = 0.5


def is_text_quality_good(text: str) -> bool:
    """Low share of control bytes and mostly alphanumeric or whitespace."""
    if not text:
        return False
    non_printable = len(_NON_PRINTABLE_RE.findall(text))
    readable = len(_READABLE_RE.findall(text))
    return (
        non_printable / len(text) < MAX_NON_PRINTABLE_RATIO
        and readable / len(text) > MIN_READABLE_RATIO
    )


def calculate_text_confidence(text: str) -> float:
    """Weighted presence of statement keywords, dates and amounts, capped at 1."""
    if len(text) < 100:
        return 0.1
    confidence = 0.5
    if _FINANCIAL_KEYWORDS_RE.search(text):
        confidence += 0.2
    if _DATE_RE.search(text):
        confidence += 0.2
    if _AMOUNT_RE.search(text):
        confidence += 0.1
    return min(1.0, confidence)


def detect_language(text: str) -> str:
    """Pick the language whose financial keywords appear most; "unknown" if none."""
    lowered = text.lower()
    counts = {
        language: sum(1 for keyword in keywords if keyword in lowered)
        for language, keywords in _LANGUAGE_KEYWORDS.items()
    }
    best = max(counts, key=lambda language: counts[language])
    if counts[best] == 0:
        return "unknown"
    if counts["it"] == counts["en"]:
        return "en"
    return best


def ocr_language_hint(language: str) -> str:
    """Tesseract language string for a requested document language."""
    return _OCR_LANGUAGE_HINTS.get(language, _OCR_AUTO_HINT)

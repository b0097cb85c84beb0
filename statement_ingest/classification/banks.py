import re

from statement_ingest.classification.models import UNKNOWN_BANK

BANK_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), name)
    for pattern, name in (
        (r"revolut", "Revolut"),
        (r"intesa\s*sanpaolo", "Intesa Sanpaolo"),
        (r"unicredit", "UniCredit"),
        (r"banco\s*bpm", "Banco BPM"),
        (r"\bbnl\b", "BNL"),
        (r"poste\s*italiane|bancoposta", "Poste Italiane"),
        (r"fineco", "Fineco"),
        (r"\bing\s*(?:bank|direct)", "ING"),
        (r"monte\s*dei\s*paschi", "Monte dei Paschi"),
        (r"\bn26\b", "N26"),
        (r"\bchase\b", "Chase"),
        (r"bank\s*of\s*america", "Bank of America"),
        (r"wells\s*fargo", "Wells Fargo"),
        (r"capital\s*one", "Capital One"),
        (r"\bhsbc\b", "HSBC"),
        (r"barclays", "Barclays"),
    )
)


def detect_bank(text: str) -> str:
    """Return the first known institution named in the text."""
    for pattern, name in BANK_PATTERNS:
        if pattern.search(text):
            return name
    return UNKNOWN_BANK

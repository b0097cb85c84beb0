import re
from decimal import Decimal

from statement_ingest.transactions.models import DEFAULT_CATEGORY, Categorization

MERCHANTS: dict[str, tuple[str, float]] = {
    "spotify": ("Entertainment", 0.95),
    "netflix": ("Entertainment", 0.95),
    "disney": ("Entertainment", 0.95),
    "canva": ("Entertainment", 0.95),
    "didi": ("Transportation", 0.92),
    "uber": ("Transportation", 0.92),
    "qantas": ("Transportation", 0.95),
    "trenitalia": ("Transportation", 0.95),
    "esselunga": ("Food & Dining", 0.95),
    "coop": ("Food & Dining", 0.90),
    "conad": ("Food & Dining", 0.90),
    "carrefour": ("Food & Dining", 0.90),
    "lidl": ("Food & Dining", 0.90),
    "coles": ("Food & Dining", 0.92),
    "amazon": ("Shopping", 0.88),
    "aliexpress": ("Shopping", 0.88),
    "zara": ("Shopping", 0.85),
    "pharmacy": ("Healthcare", 0.92),
    "farmacia": ("Healthcare", 0.92),
}

KEYWORD_RULES: tuple[tuple[re.Pattern[str], str, float, str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), category, confidence, reasoning)
    for pattern, category, confidence, reasoning in (
        (
            r"pagamento\s+da|bonifico\s+da|salary|wage|stipendio|accredito|refund|rimborso",
            "Income",
            0.95,
            "Payment received/deposit keyword",
        ),
        (
            r"investment|investiment|\betf\b|dividend|brokerage",
            "Investments",
            0.90,
            "Investment keyword",
        ),
        (
            r"canone|subscription|abbonamento|premium|membership",
            "Bills & Utilities",
            0.92,
            "Subscription/membership fee",
        ),
        (
            r"restaurant|ristorante|pizz|\bbar\b|cafe|caff|coffee|supermarket|supermercato|grocery",
            "Food & Dining",
            0.85,
            "Food/dining keyword",
        ),
        (
            r"taxi|fuel|petrol|carburante|parking|parcheggio|metro|train|treno|\bbus\b|"
            r"airline|flight",
            "Transportation",
            0.88,
            "Transportation keyword",
        ),
        (
            r"medical|medico|doctor|clinic|health|hospital|ospedale",
            "Healthcare",
            0.90,
            "Healthcare keyword",
        ),
        (
            r"electric|enel|water|gas\s+bill|internet|phone|telefon|insurance|"
            r"assicurazion|utility|bolletta",
            "Bills & Utilities",
            0.88,
            "Utility/bill keyword",
        ),
        (
            r"shop|store|negozio|retail|clothing|electronics|purchase|acquisto",
            "Shopping",
            0.80,
            "Shopping keyword",
        ),
        (r"cinema|theat|concert|museum|museo|gaming", "Entertainment", 0.85, "Leisure keyword"),
    )
)

_LARGE_AMOUNT = Decimal("1000")
_PAYEE_NOISE_RE = re.compile(r"[\d€$£]+")


def categorize(description: str, amount: Decimal = Decimal("0")) -> Categorization:
    """Assign a category and a confidence to a transaction description.

    Known merchants win over keyword rules; descriptions matching nothing
    fall back to the default category with a confidence that asks for review.
    """
    lowered = description.lower()
    for merchant, (category, confidence) in MERCHANTS.items():
        if merchant in lowered:
            return Categorization(category, confidence, f"Exact merchant match: {merchant}")

    for pattern, category, confidence, reasoning in KEYWORD_RULES:
        if pattern.search(lowered):
            return Categorization(category, confidence, reasoning)

    if abs(amount) > _LARGE_AMOUNT:
        return Categorization(
            DEFAULT_CATEGORY, 0.60, "Large amount, unclear description - manual review recommended"
        )
    return Categorization(
        DEFAULT_CATEGORY, 0.50, "No clear category match - manual review recommended"
    )


def extract_payee(description: str) -> str:
    """Take the first three meaningful words of a description as the payee."""
    words = [word for word in _PAYEE_NOISE_RE.sub("", description).split() if len(word) > 2]
    return " ".join(words[:3]) if words else "Unknown"


def match_merchant(description: str) -> str:
    lowered = description.lower()
    for merchant in MERCHANTS:
        if merchant in lowered:
            return merchant.title()
    return ""

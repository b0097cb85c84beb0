from dataclasses import dataclass

UNKNOWN_BANK = "Unknown"
UNKNOWN_LANGUAGE = "unknown"


@dataclass(frozen=True)
class DetectionResult:
    """Source institution and language of a statement, computed once per run."""

    bank: str = UNKNOWN_BANK
    language: str = UNKNOWN_LANGUAGE

    @property
    def bank_known(self) -> bool:
        return self.bank != UNKNOWN_BANK

    @property
    def language_known(self) -> bool:
        return self.language != UNKNOWN_LANGUAGE

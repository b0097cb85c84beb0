from dataclasses import dataclass, field


@dataclass(frozen=True)
class OcrPage:
    """Recognized text of one page image."""

    text: str
    confidence: float  # engine-reported, 0-100


@dataclass(frozen=True)
class OcrDocument:
    """Recognized text of a whole document."""

    pages: list[OcrPage] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n\n".join(page.text for page in self.pages if page.text).strip()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def confidence(self) -> float:
        """Mean engine confidence over pages that produced text, 0-100."""
        scored = [page.confidence for page in self.pages if page.text]
        if not scored:
            return 0.0
        return sum(scored) / len(scored)

from abc import ABC, abstractmethod

from PIL import Image

from statement_ingest.ocr.models import OcrPage


class BaseOcrEngine(ABC):
    """Contract for OCR engine adapters."""

    @abstractmethod
    def recognize(self, image: Image.Image, languages: str) -> OcrPage:
        """Recognize text on a single page image.

        Args:
            image: Rasterized page.
            languages: Engine language hint, e.g. "eng+ita".

        Returns:
            OcrPage with the recognized text and a 0-100 confidence.

        Raises:
            OcrError: if the engine is unavailable or recognition fails.
        """

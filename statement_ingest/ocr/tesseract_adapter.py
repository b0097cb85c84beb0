import threading

import pytesseract
from PIL import Image, ImageOps

from statement_ingest.ocr.base import BaseOcrEngine
from statement_ingest.ocr.exceptions import OcrError
from statement_ingest.ocr.models import OcrPage

# pytesseract reads the binary path from a module global.
_COMMAND_LOCK = threading.Lock()


class TesseractAdapter(BaseOcrEngine):
    """Recognizes page images with Tesseract via pytesseract."""

    CONFIG = "--oem 3 --psm 6"

    def __init__(self, tesseract_cmd: str = "") -> None:
        self._tesseract_cmd = tesseract_cmd

    def recognize(self, image: Image.Image, languages: str) -> OcrPage:
        prepared = ImageOps.autocontrast(ImageOps.grayscale(image))
        if not self._tesseract_cmd:
            return self._build_page(self._read_data(prepared, languages))
        with _COMMAND_LOCK:
            previous = pytesseract.pytesseract.tesseract_cmd
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
            try:
                data = self._read_data(prepared, languages)
            finally:
                pytesseract.pytesseract.tesseract_cmd = previous
        return self._build_page(data)

    def _read_data(self, image: Image.Image, languages: str) -> dict[str, list]:
        try:
            return pytesseract.image_to_data(
                image,
                lang=languages,
                config=self.CONFIG,
                output_type=pytesseract.Output.DICT,
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrError("Tesseract is not installed or not on PATH") from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            raise OcrError(f"Tesseract recognition failed: {exc}") from exc

    @staticmethod
    def _build_page(data: dict[str, list]) -> OcrPage:
        lines: dict[tuple[int, int, int], list[str]] = {}
        confidences: list[float] = []
        for i, word in enumerate(data["text"]):
            word = word.strip()
            conf = float(data["conf"][i])
            if not word or conf < 0:
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(word)
            confidences.append(conf)
        text = "\n".join(" ".join(words) for _, words in sorted(lines.items()))
        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return OcrPage(text=text, confidence=confidence)

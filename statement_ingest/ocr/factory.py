from statement_ingest.config.settings import Settings
from statement_ingest.ocr.base import BaseOcrEngine
from statement_ingest.ocr.tesseract_adapter import TesseractAdapter


class OcrEngineFactory:
    """Creates the configured OCR engine adapter."""

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        engine = settings.ocr_engine.lower()
        if engine == "tesseract":
            return TesseractAdapter(tesseract_cmd=settings.ocr_tesseract_cmd)
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: ['tesseract']")

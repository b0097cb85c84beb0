from statement_ingest.config.settings import Settings
from statement_ingest.extraction.chain import TextExtractionChain
from statement_ingest.extraction.hybrid import HybridMerger, HybridStrategy
from statement_ingest.extraction.native import NativeTextStrategy
from statement_ingest.extraction.ocr_strategy import OcrStrategy
from statement_ingest.ocr.base import BaseOcrEngine
from statement_ingest.ocr.factory import OcrEngineFactory
from statement_ingest.pdf.base import BasePdfExtractor
from statement_ingest.pdf.pdfplumber_adapter import PdfPlumberAdapter
from statement_ingest.pdf.pymupdf_adapter import PyMuPdfAdapter


class TextExtractionChainFactory:
    """Builds the native -> OCR -> hybrid chain from settings."""

    PDF_ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        pdf_extractor: BasePdfExtractor | None = None,
        ocr_engine: BaseOcrEngine | None = None,
    ) -> TextExtractionChain:
        min_length = settings.min_text_length
        return TextExtractionChain(
            [
                NativeTextStrategy(
                    pdf_extractor or cls.create_pdf_extractor(settings),
                    min_length,
                ),
                OcrStrategy(
                    ocr_engine or OcrEngineFactory.create(settings),
                    min_length,
                    dpi=settings.ocr_dpi,
                    timeout_seconds=settings.ocr_timeout_seconds,
                ),
                HybridStrategy(HybridMerger(), min_length),
            ]
        )

    @classmethod
    def create_pdf_extractor(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return adapter_cls()

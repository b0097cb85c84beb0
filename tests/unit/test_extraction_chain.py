import time
from unittest.mock import MagicMock

from statement_ingest.documents.models import SourceDocument
from statement_ingest.extraction.chain import TextExtractionChain
from statement_ingest.extraction.hybrid import HybridMerger, HybridStrategy
from statement_ingest.extraction.models import ChainRun, ExtractionMethod
from statement_ingest.extraction.native import NativeTextStrategy
from statement_ingest.extraction.ocr_strategy import OcrStrategy
from statement_ingest.ocr.base import BaseOcrEngine
from statement_ingest.ocr.models import OcrPage
from statement_ingest.pdf.base import BasePdfExtractor
from statement_ingest.pdf.pdfplumber_adapter import PdfPlumberAdapter


def _make_chain(
    engine: BaseOcrEngine,
    pdf_extractor: BasePdfExtractor | None = None,
    ocr_timeout: float = 5.0,
) -> TextExtractionChain:
    return TextExtractionChain(
        [
            NativeTextStrategy(pdf_extractor or PdfPlumberAdapter(), 100),
            OcrStrategy(engine, 100, dpi=30, timeout_seconds=ocr_timeout),
            HybridStrategy(HybridMerger(), 100),
        ]
    )


class TestTextExtractionChain:
    async def test_native_text_wins_without_ocr(self, statement_pdf_bytes: bytes) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        document = SourceDocument.from_bytes(statement_pdf_bytes, "jan.pdf", "pdf")

        result = await _make_chain(engine).run(document, ChainRun())

        assert result.succeeded
        assert result.attempt is not None
        assert result.attempt.method is ExtractionMethod.NATIVE
        assert result.attempt.page_count == 2
        assert "ESSELUNGA" in result.attempt.text
        engine.recognize.assert_not_called()

    async def test_image_only_pdf_escalates_to_ocr(
        self, empty_pdf_bytes: bytes, statement_text: str
    ) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        engine.recognize.return_value = OcrPage(text=statement_text, confidence=90.0)
        document = SourceDocument.from_bytes(empty_pdf_bytes, "scan.pdf", "pdf")

        result = await _make_chain(engine).run(document, ChainRun())

        assert result.attempt is not None
        assert result.attempt.method is ExtractionMethod.OCR
        assert result.attempt.confidence == (1.0 + 0.9) / 2
        assert [f.method for f in result.failures] == [ExtractionMethod.NATIVE]
        engine.recognize.assert_called_once()
        assert engine.recognize.call_args.args[1] == "eng+ita"

    async def test_partial_outputs_are_merged(self, empty_pdf_bytes: bytes) -> None:
        pdf_extractor = MagicMock()
        pdf_extractor.extract_pages.return_value = ["Saldo conto corrente 01/01/2024 " * 2]
        engine = MagicMock(spec=BaseOcrEngine)
        engine.recognize.return_value = OcrPage(
            text="Movimenti 02/01/2024 10,00 " * 2, confidence=70.0
        )
        document = SourceDocument.from_bytes(empty_pdf_bytes, "mixed.pdf", "pdf")

        result = await _make_chain(engine, pdf_extractor).run(document, ChainRun())

        assert result.attempt is not None
        assert result.attempt.method is ExtractionMethod.HYBRID
        assert "Saldo conto corrente" in result.attempt.text
        assert "Movimenti" in result.attempt.text
        engine.recognize.assert_called_once()

    async def test_all_strategies_fail(self, empty_pdf_bytes: bytes) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        engine.recognize.return_value = OcrPage(text="", confidence=0.0)
        document = SourceDocument.from_bytes(empty_pdf_bytes, "blank.pdf", "pdf")

        result = await _make_chain(engine).run(document, ChainRun())

        assert not result.succeeded
        assert [f.method for f in result.failures] == [
            ExtractionMethod.NATIVE,
            ExtractionMethod.OCR,
            ExtractionMethod.HYBRID,
        ]

    async def test_ocr_disabled_is_recorded(self, empty_pdf_bytes: bytes) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        document = SourceDocument.from_bytes(empty_pdf_bytes, "blank.pdf", "pdf")

        result = await _make_chain(engine).run(document, ChainRun(enable_ocr=False))

        assert result.failures[1].reason == "OCR disabled"
        engine.recognize.assert_not_called()

    async def test_ocr_timeout_is_a_failure(self, empty_pdf_bytes: bytes) -> None:
        def slow_recognize(image, languages):  # type: ignore[no-untyped-def]
            time.sleep(0.3)
            return OcrPage(text="late", confidence=50.0)

        engine = MagicMock(spec=BaseOcrEngine)
        engine.recognize.side_effect = slow_recognize
        document = SourceDocument.from_bytes(empty_pdf_bytes, "scan.pdf", "pdf")

        result = await _make_chain(engine, ocr_timeout=0.05).run(document, ChainRun())

        assert not result.succeeded
        assert result.timed_out_methods == [ExtractionMethod.OCR]

    async def test_reports_each_strategy(self, empty_pdf_bytes: bytes) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        engine.recognize.return_value = OcrPage(text="", confidence=0.0)
        seen: list[ExtractionMethod] = []
        run = ChainRun(on_strategy=seen.append)
        document = SourceDocument.from_bytes(empty_pdf_bytes, "blank.pdf", "pdf")

        await _make_chain(engine).run(document, run)

        assert seen == [ExtractionMethod.NATIVE, ExtractionMethod.OCR, ExtractionMethod.HYBRID]
        assert len(run.outcomes) == 3

    async def test_force_ocr_skips_text_layer(
        self, statement_pdf_bytes: bytes, statement_text: str
    ) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        engine.recognize.return_value = OcrPage(text=statement_text, confidence=80.0)
        document = SourceDocument.from_bytes(statement_pdf_bytes, "jan.pdf", "pdf")

        result = await _make_chain(engine).run(document, ChainRun(force_ocr=True))

        assert result.attempt is not None
        assert result.attempt.method is ExtractionMethod.OCR


class TestNativeTabular:
    async def test_csv_produces_table(self, statement_csv_bytes: bytes) -> None:
        document = SourceDocument.from_bytes(statement_csv_bytes, "jan.csv", "csv")
        strategy = NativeTextStrategy(PdfPlumberAdapter(), 100)

        outcome = await strategy.attempt(document, ChainRun())

        assert outcome.method is ExtractionMethod.NATIVE
        assert getattr(outcome, "table", None) is not None
        assert "Stipendio ACME" in outcome.text

    async def test_header_only_csv_fails(self) -> None:
        document = SourceDocument.from_bytes(b"Date,Description,Amount\n", "e.csv", "csv")
        strategy = NativeTextStrategy(PdfPlumberAdapter(), 100)

        outcome = await strategy.attempt(document, ChainRun())

        assert "no data rows" in getattr(outcome, "reason", "")

    async def test_ocr_skips_tabular_documents(self, statement_csv_bytes: bytes) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        document = SourceDocument.from_bytes(statement_csv_bytes, "jan.csv", "csv")

        outcome = await OcrStrategy(engine, 100, dpi=30, timeout_seconds=1).attempt(
            document, ChainRun()
        )

        assert getattr(outcome, "reason", "") == "OCR only applies to PDF documents"

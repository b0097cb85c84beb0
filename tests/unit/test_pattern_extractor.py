from decimal import Decimal

from statement_ingest.transactions.pattern_extractor import PatternTransactionExtractor
from statement_ingest.transactions.validator import TransactionValidator


class TestPatternTransactionExtractor:
    def test_extracts_statement_lines(self, statement_text: str) -> None:
        transactions = PatternTransactionExtractor().extract(statement_text)

        assert len(transactions) == 12
        first = transactions[0]
        assert first.date == "2024-01-02"
        assert first.description == "Salary ACME Srl"
        assert first.amount == Decimal("2500.00")
        assert first.category == "Income"
        assert first.raw_source_line == "02/01/2024 Salary ACME Srl 2500.00"

    def test_totals_match_statement(self, statement_text: str) -> None:
        transactions = PatternTransactionExtractor().extract(statement_text)

        income = sum(t.amount for t in transactions if t.amount > 0)
        expenses = sum(t.amount for t in transactions if t.amount < 0)
        assert income == Decimal("2650.00")
        assert expenses == Decimal("-361.43")

    def test_is_deterministic(self, statement_text: str) -> None:
        extractor = PatternTransactionExtractor()
        assert extractor.extract(statement_text) == extractor.extract(statement_text)

    def test_sets_merchant_and_category(self, statement_text: str) -> None:
        transactions = PatternTransactionExtractor().extract(statement_text)
        esselunga = next(t for t in transactions if "ESSELUNGA" in t.description)
        assert esselunga.merchant == "Esselunga"
        assert esselunga.category == "Food & Dining"
        assert esselunga.amount == Decimal("-45.20")

    def test_debit_keyword_signs_unsigned_amount(self) -> None:
        [transaction] = PatternTransactionExtractor().extract(
            "28 Jan 2024 Card payment Coffee bar 3,50 EUR"
        )
        assert transaction.date == "2024-01-28"
        assert transaction.amount == Decimal("-3.50")
        assert transaction.description == "Card payment Coffee bar"

    def test_uses_first_amount_on_line(self) -> None:
        [transaction] = PatternTransactionExtractor().extract(
            "05/01/2024 Lidl Milano -20,00 1.230,00"
        )
        assert transaction.amount == Decimal("-20.00")

    def test_skips_lines_without_date_or_amount(self) -> None:
        text = "\n".join(
            [
                "Account statement January 2024",
                "05/01/2024 Opening note without amount",
                "Balance carried forward 1.230,00",
                "short",
            ]
        )
        assert PatternTransactionExtractor().extract(text) == []

    def test_splits_single_line_layout_on_dates(self) -> None:
        segments = [f"{day % 28 + 1:02d}/01/2024 Shop purchase -10,00 " for day in range(200)]
        text = "".join(segments)

        transactions = PatternTransactionExtractor().extract(text)

        assert len(transactions) == 200
        assert all(t.amount == Decimal("-10.00") for t in transactions)
        assert transactions[0].date == "2024-01-01"

    def test_drops_lines_with_only_date_and_amount(self) -> None:
        text = "31/01/2024        1.234,56\n31/01/2024 | -- | 2.000,00 |"
        transactions = PatternTransactionExtractor().extract(text)

        assert transactions == []
        assert TransactionValidator().validate(transactions).transactions == ()

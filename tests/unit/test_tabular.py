import io

import pandas as pd
import pytest

from statement_ingest.documents.models import DocumentType
from statement_ingest.extraction.exceptions import TabularReadError
from statement_ingest.extraction.tabular import read_table, render_table


class TestReadTable:
    def test_reads_semicolon_csv_with_header(self, statement_csv_bytes: bytes) -> None:
        table = read_table(statement_csv_bytes, DocumentType.CSV)
        assert table[0] == ("Data", "Descrizione", "Importo")
        assert table[1] == ("02/01/2024", "Stipendio ACME", "2500,00")

    def test_drops_blank_rows(self, statement_csv_bytes: bytes) -> None:
        table = read_table(statement_csv_bytes, DocumentType.CSV)
        assert len(table) == 5

    def test_reads_cp1252_csv(self) -> None:
        data = "Date,Description,Amount\n2024-01-02,Caffè Roma,-3.50\n".encode("cp1252")
        table = read_table(data, DocumentType.CSV)
        assert table[1][1] == "Caffè Roma"

    def test_reads_first_non_empty_sheet(self) -> None:
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            pd.DataFrame().to_excel(writer, sheet_name="Cover", index=False)
            pd.DataFrame(
                {"Date": ["2024-01-02"], "Description": ["Coffee"], "Amount": ["-3.50"]}
            ).to_excel(writer, sheet_name="Movements", index=False)
        table = read_table(buf.getvalue(), DocumentType.SPREADSHEET)
        assert table[0] == ("Date", "Description", "Amount")
        assert table[1] == ("2024-01-02", "Coffee", "-3.50")

    def test_invalid_spreadsheet_raises(self) -> None:
        with pytest.raises(TabularReadError):
            read_table(b"definitely not a workbook", DocumentType.SPREADSHEET)

    def test_pdf_is_not_tabular(self) -> None:
        with pytest.raises(TabularReadError):
            read_table(b"%PDF", DocumentType.PDF)


class TestRenderTable:
    def test_joins_cells(self) -> None:
        table = (("Date", "Description", "Amount"), ("2024-01-02", "", "-3.50"))
        assert render_table(table) == "Date | Description | Amount\n2024-01-02 | -3.50"

"""Reads CSV and spreadsheet statements into rows of strings."""

import io

import pandas as pd

from statement_ingest.documents.models import DocumentType
from statement_ingest.extraction.exceptions import TabularReadError

Table = tuple[tuple[str, ...], ...]

_CSV_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def read_table(data: bytes, document_type: DocumentType) -> Table:
    """Parse tabular bytes into rows, header row included, blank rows dropped.

    For spreadsheets the first sheet containing any data wins.

    Raises:
        TabularReadError: if the bytes cannot be parsed as the declared type.
    """
    if document_type is DocumentType.CSV:
        frame = _read_csv(data)
    elif document_type is DocumentType.SPREADSHEET:
        frame = _read_spreadsheet(data)
    else:
        raise TabularReadError(f"{document_type.value} is not a tabular format")
    return _frame_to_rows(frame)


def render_table(table: Table) -> str:
    """Render rows as ` | `-separated text lines for text-based consumers."""
    return "\n".join(" | ".join(cell for cell in row if cell) for row in table)


def _read_csv(data: bytes) -> pd.DataFrame:
    last_error: Exception | None = None
    for encoding in _CSV_ENCODINGS:
        try:
            return pd.read_csv(
                io.BytesIO(data),
                sep=None,
                engine="python",
                header=None,
                dtype=str,
                keep_default_na=False,
                encoding=encoding,
                skip_blank_lines=True,
            )
        except UnicodeDecodeError as exc:
            last_error = exc
        except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as exc:
            raise TabularReadError(f"CSV parsing failed: {exc}") from exc
    raise TabularReadError(f"CSV decoding failed: {last_error}")


def _read_spreadsheet(data: bytes) -> pd.DataFrame:
    try:
        sheets = pd.read_excel(
            io.BytesIO(data),
            sheet_name=None,
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except Exception as exc:
        raise TabularReadError(f"Spreadsheet parsing failed: {exc}") from exc
    for frame in sheets.values():
        if not frame.empty:
            return frame
    return pd.DataFrame()


def _frame_to_rows(frame: pd.DataFrame) -> Table:
    rows = []
    for values in frame.itertuples(index=False, name=None):
        cells = tuple(str(value).strip() for value in values)
        if any(cells):
            rows.append(cells)
    return tuple(rows)

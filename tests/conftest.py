import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

STATEMENT_PAGES: list[list[str]] = [
    [
        "INTESA SANPAOLO - Account statement January 2024",
        "Date Description Amount",
        "02/01/2024 Salary ACME Srl 2500.00",
        "03/01/2024 ESSELUNGA Milano -45.20",
        "05/01/2024 Netflix subscription -12.99",
        "08/01/2024 Trenitalia ticket -29.90",
        "10/01/2024 Farmacia Centrale -18.50",
        "12/01/2024 Amazon order -64.00",
    ],
    [
        "Account statement January 2024 - continued",
        "15/01/2024 Enel energia bolletta -80.35",
        "18/01/2024 Ristorante Da Mario -52.00",
        "20/01/2024 Uber trip -15.40",
        "22/01/2024 Coop supermercato -33.10",
        "25/01/2024 Spotify premium -9.99",
        "28/01/2024 Bonifico da Mario Rossi 150.00",
    ],
]


def _render_pdf(pages: list[list[str]]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 20
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def blank_six_page_pdf_bytes() -> bytes:
    """Generate a six-page PDF with no text, for OCR page-loop tests."""
    return _render_pdf([[] for _ in range(6)])


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _render_pdf([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _render_pdf([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def statement_lines() -> list[str]:
    """All lines of the two-page statement, page by page."""
    return [line for page in STATEMENT_PAGES for line in page]


@pytest.fixture()
def statement_text(statement_lines: list[str]) -> str:
    return "\n".join(statement_lines)


@pytest.fixture()
def statement_pdf_bytes() -> bytes:
    """Two-page native-text statement with 12 well-formed transaction lines."""
    return _render_pdf(STATEMENT_PAGES)


@pytest.fixture()
def statement_csv_bytes() -> bytes:
    return (
        "Data;Descrizione;Importo\n"
        "02/01/2024;Stipendio ACME;2500,00\n"
        "03/01/2024;ESSELUNGA Milano;-45,20\n"
        "05/01/2024;Netflix;-12,99\n"
        "\n"
        "08/01/2024;Trenitalia;-29,90\n"
    ).encode("utf-8")

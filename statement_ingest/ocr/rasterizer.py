from collections.abc import Iterator

import pymupdf
from PIL import Image

from statement_ingest.ocr.exceptions import OcrError


def iter_pdf_pages(pdf_bytes: bytes, dpi: int) -> Iterator[tuple[int, int, Image.Image]]:
    """Render PDF pages to RGB images one at a time.

    Yields `(page_number, page_count, image)`; only the current page's bitmap
    is held in memory.
    """
    try:
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
    except Exception as exc:
        raise OcrError(f"PDF rasterization failed: {exc}") from exc
    with doc:
        total = doc.page_count
        for number, page in enumerate(doc, start=1):
            try:
                pixmap = page.get_pixmap(dpi=dpi, alpha=False)
            except Exception as exc:
                raise OcrError(f"PDF rasterization failed on page {number}: {exc}") from exc
            yield number, total, Image.frombytes(
                "RGB", (pixmap.width, pixmap.height), pixmap.samples
            )

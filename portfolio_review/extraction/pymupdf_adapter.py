import pymupdf

from portfolio_review.extraction.base import BaseTextExtractor
from portfolio_review.extraction.exceptions import ExtractionError


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts text from PDF using PyMuPDF.

    Blocks are sorted top-to-bottom, left-to-right so that holdings tables read
    in row order.
    """

    def extract(self, pdf_bytes: bytes) -> str:
        if not pdf_bytes:
            raise ExtractionError("Document is empty")
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text("text", sort=True) for page in doc]
        except Exception as exc:
            raise ExtractionError(f"pymupdf extraction failed: {exc}") from exc
        return "\n".join(pages).strip()

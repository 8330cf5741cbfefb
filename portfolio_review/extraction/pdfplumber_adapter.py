import io

import pdfplumber

from portfolio_review.extraction.base import BaseTextExtractor
from portfolio_review.extraction.exceptions import ExtractionError


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts text from PDF using pdfplumber.

    Statement tables keep their column layout better with pdfplumber, which is
    why it is the default engine.
    """

    def extract(self, pdf_bytes: bytes) -> str:
        if not pdf_bytes:
            raise ExtractionError("Document is empty")
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return "\n".join(pages).strip()

from portfolio_review.config.settings import Settings
from portfolio_review.extraction.base import BaseTextExtractor
from portfolio_review.extraction.pdfplumber_adapter import PdfPlumberAdapter
from portfolio_review.extraction.pymupdf_adapter import PyMuPdfAdapter


class TextExtractorFactory:
    """Creates the text extractor selected by ``pdf_engine``."""

    ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }
    # Older deployments configured PyMuPDF by its legacy module name.
    ALIASES: dict[str, str] = {"fitz": "pymupdf"}

    @classmethod
    def create(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.pdf_engine.strip().lower()
        engine = cls.ALIASES.get(engine, engine)
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. "
                f"Choose from: {sorted([*cls.ADAPTERS, *cls.ALIASES])}"
            )
        return adapter_cls()

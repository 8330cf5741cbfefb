from abc import ABC, abstractmethod


class BaseTextExtractor(ABC):
    """Contract for all document text extraction adapters.

    Implementations are synchronous and CPU bound; the pipeline runs them in a
    worker thread.
    """

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Extracted text, pages joined by newlines.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """

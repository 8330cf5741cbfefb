class ExtractionError(Exception):
    """Raised when a document's text cannot be extracted."""


class EmptyDocumentError(ExtractionError):
    """Raised when a document yields no extractable text."""

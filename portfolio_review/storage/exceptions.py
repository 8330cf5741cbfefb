class StorageError(Exception):
    """Base exception for document storage errors."""


class DocumentNotFoundError(StorageError):
    """Raised when no document exists for a source reference."""


class InvalidSourceRefError(StorageError):
    """Raised when a source reference is malformed or escapes the storage root."""

from abc import ABC, abstractmethod


class BaseDocumentStorage(ABC):
    """Contract for the uploaded-document storage collaborator.

    Documents are addressed by an opaque source reference string issued by
    ``upload_file``.
    """

    @abstractmethod
    async def upload_file(self, data: bytes, filename: str | None = None) -> str:
        """Persist document bytes and return their source reference."""

    @abstractmethod
    async def download_file(self, source_ref: str) -> bytes:
        """Return the bytes stored under ``source_ref``.

        Raises:
            DocumentNotFoundError: if nothing is stored under the reference.
            InvalidSourceRefError: if the reference is malformed.
        """

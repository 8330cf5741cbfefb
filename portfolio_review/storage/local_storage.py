import asyncio
import uuid
from pathlib import Path

from portfolio_review.logging.logger import Log
from portfolio_review.storage.base import BaseDocumentStorage
from portfolio_review.storage.exceptions import DocumentNotFoundError, InvalidSourceRefError


def document_file_path(storage_root: Path, source_ref: str) -> Path:
    """Resolve a source reference to a path inside the storage root."""
    root = storage_root.resolve()
    path = (root / source_ref).resolve()
    if not path.is_relative_to(root) or path == root:
        raise InvalidSourceRefError(f"Source reference '{source_ref}' is outside storage")
    return path


class LocalDocumentStorage(BaseDocumentStorage):
    """Stores uploaded documents as files under a local root directory.

    Source references have the form ``uploads/{uuid}.pdf``.
    """

    UPLOAD_DIR = "uploads"

    def __init__(self, storage_root: Path) -> None:
        self._storage_root = storage_root

    async def upload_file(self, data: bytes, filename: str | None = None) -> str:
        source_ref = f"{self.UPLOAD_DIR}/{uuid.uuid4()}.pdf"
        path = document_file_path(self._storage_root, source_ref)
        await asyncio.to_thread(self._write, path, data)
        Log.info(
            f"Stored {len(data)} bytes",
            source_ref=source_ref,
            filename=filename or "-",
        )
        return source_ref

    async def download_file(self, source_ref: str) -> bytes:
        if not source_ref:
            raise InvalidSourceRefError("Source reference is empty")
        path = document_file_path(self._storage_root, source_ref)
        if not path.is_file():
            raise DocumentNotFoundError(f"Document not found: {source_ref}")
        return await asyncio.to_thread(path.read_bytes)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

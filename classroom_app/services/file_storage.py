# classroom_app/services/file_storage.py
"""Storage for uploaded files.

The classroom services only ever see the opaque references returned by
``store``; where the bytes live is up to the implementation.
"""
import asyncio
import logging
import secrets
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from fastapi import UploadFile

from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 1024 * 1024


class FileStorage(ABC):
    @abstractmethod
    async def store(self, data: bytes, filename: str) -> str:
        """Persist ``data`` and return a reference to it"""

    @abstractmethod
    async def fetch(self, reference: str) -> bytes:
        """Return the bytes behind ``reference``"""


class LocalFileStorage(FileStorage):
    """Files under a local directory; references are paths relative to it."""

    def __init__(self, root):
        self.root = Path(root).resolve()

    def _path_for(self, reference: str) -> Path:
        path = (self.root / reference).resolve()
        if self.root not in path.parents:
            raise ValidationError("Invalid file reference", field="reference")
        return path

    def _write(self, path: Path, data: bytes):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def store(self, data: bytes, filename: str) -> str:
        suffix = Path(filename or "").suffix[:16]
        reference = f"{secrets.token_hex(16)}{suffix}"
        await asyncio.to_thread(self._write, self._path_for(reference), data)
        logger.info(f"Stored {len(data)} bytes as {reference}")
        return reference

    async def fetch(self, reference: str) -> bytes:
        path = self._path_for(reference)
        if not path.is_file():
            raise NotFoundError("File", reference)
        return await asyncio.to_thread(path.read_bytes)


async def read_upload(upload: UploadFile, limit: int) -> bytes:
    """Read an upload in chunks, rejecting it as soon as it passes ``limit`` bytes"""
    chunks = []
    size = 0
    while True:
        chunk = await upload.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise ValidationError(f"File {upload.filename} exceeds the upload size limit", field="files")
        chunks.append(chunk)
    return b"".join(chunks)


async def store_uploads(storage: FileStorage, uploads: Sequence[UploadFile], limit: int) -> List[str]:
    """Store every upload and return the references; nothing is written unless all fit"""
    contents = [(upload.filename, await read_upload(upload, limit)) for upload in uploads]
    return [await storage.store(data, filename) for filename, data in contents]

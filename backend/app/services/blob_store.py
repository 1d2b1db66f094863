"""Blob storage on the local volume.

Blobs are addressed by a generated key (a uuid hex string), never by the
uploader's filename, so untrusted names cannot collide or traverse paths.
"""
import asyncio
import logging
import shutil
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os

from app.exceptions import BlobNotFoundError, StorageWriteError

logger = logging.getLogger(__name__)

STAGING_DIRNAME = ".incoming"


class BlobStore:
    """Handles blob write/read/delete inside a single storage directory."""

    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path).resolve()
        self.staging_dir = self.base_path / STAGING_DIRNAME
        self.staging_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, storage_path: str) -> Path:
        """Map a storage key to its file, refusing anything outside base_path."""
        name = Path(storage_path).name
        if not name or name != storage_path or name in (".", "..", STAGING_DIRNAME):
            raise BlobNotFoundError(f"Invalid storage path: {storage_path!r}")
        return self.base_path / name

    async def put(self, temp_path: str | Path) -> str:
        """Move a staged file into the store. Returns its storage key."""
        storage_path = uuid.uuid4().hex
        target = self.base_path / storage_path
        try:
            await asyncio.to_thread(shutil.move, str(temp_path), str(target))
        except OSError as e:
            raise StorageWriteError(f"Could not store blob: {e}") from e
        logger.debug("Stored blob %s", storage_path)
        return storage_path

    async def resolve(self, storage_path: str) -> Path:
        """Return the path of an existing blob, for download."""
        path = self._path_for(storage_path)
        if not await aiofiles.os.path.isfile(path):
            raise BlobNotFoundError(f"Blob {storage_path} does not exist")
        return path

    async def read(self, storage_path: str) -> bytes:
        path = await self.resolve(storage_path)
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def remove(self, storage_path: str) -> None:
        path = self._path_for(storage_path)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise BlobNotFoundError(f"Blob {storage_path} does not exist") from e
        except OSError as e:
            raise StorageWriteError(f"Could not delete blob {storage_path}: {e}") from e
        logger.debug("Removed blob %s", storage_path)

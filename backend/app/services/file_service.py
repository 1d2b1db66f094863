"""File service: keeps the blob store and the metadata catalog consistent.

Ordering is fixed. On upload the blob is written before its record; on
delete the blob is removed before its record. A failed catalog insert
triggers a best-effort removal of the blob just written, and a blob that is
already gone at delete time does not block removing its record.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles.os

from app.exceptions import (
    BlobNotFoundError,
    CatalogWriteError,
    EmptyUploadError,
    FileServiceError,
    StoredFileNotFoundError,
)
from app.models.file_record import FileRecord
from app.services.blob_store import BlobStore
from app.services.catalog import MetadataCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    """A downloadable file: its display name and the blob path on disk."""

    filename: str
    path: Path
    storage_path: str
    blob_store: BlobStore = field(repr=False, compare=False)

    async def read(self) -> bytes:
        return await self.blob_store.read(self.storage_path)


class FileService:
    def __init__(self, blob_store: BlobStore, catalog: MetadataCatalog):
        self.blob_store = blob_store
        self.catalog = catalog

    async def upload(self, display_name: str, temp_path: str | Path | None) -> FileRecord:
        """Persist a staged upload and record it under `display_name`."""
        if temp_path is None or not await aiofiles.os.path.isfile(temp_path):
            raise EmptyUploadError()
        if await aiofiles.os.path.getsize(temp_path) == 0:
            raise EmptyUploadError("Uploaded file is empty.")

        storage_path = await self.blob_store.put(temp_path)

        try:
            record = await self.catalog.insert(display_name, storage_path)
        except CatalogWriteError:
            logger.error("Catalog insert failed for %r, removing blob %s", display_name, storage_path)
            try:
                await self.blob_store.remove(storage_path)
            except FileServiceError as cleanup_err:
                logger.warning("Orphan blob %s left behind: %s", storage_path, cleanup_err)
            raise

        logger.info("Uploaded %r as %s (id=%s)", display_name, storage_path, record.id)
        return record

    async def list_files(self) -> list[str]:
        return await self.catalog.list_all()

    async def download(self, display_name: str) -> StoredFile:
        record = await self._find(display_name)
        try:
            path = await self.blob_store.resolve(record.storage_path)
        except BlobNotFoundError as e:
            logger.warning("Record %s for %r has no blob: %s", record.id, display_name, e)
            raise StoredFileNotFoundError(f'File "{display_name}" not found.') from e
        return StoredFile(
            filename=record.display_name,
            path=path,
            storage_path=record.storage_path,
            blob_store=self.blob_store,
        )

    async def delete(self, display_name: str) -> FileRecord:
        """Remove the blob, then the record it was resolved from."""
        record = await self._find(display_name)

        try:
            await self.blob_store.remove(record.storage_path)
        except BlobNotFoundError:
            # Blob already gone; the record is dangling and still has to go
            logger.warning("Blob %s for %r was already missing", record.storage_path, display_name)

        await self.catalog.delete_by_id(record.id)
        logger.info("Deleted %r (id=%s)", display_name, record.id)
        return record

    async def _find(self, display_name: str) -> FileRecord:
        record = await self.catalog.find_by_name(display_name)
        if record is None:
            raise StoredFileNotFoundError(f'File "{display_name}" not found.')
        return record

"""Metadata catalog: the `files` table mapping display names to blobs."""
import logging

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.database import build_session_factory
from app.exceptions import CatalogReadError, CatalogWriteError
from app.models import Base
from app.models.file_record import FileRecord

logger = logging.getLogger(__name__)


class MetadataCatalog:
    """Each method runs in its own short session; no state is kept between calls."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sf = build_session_factory(engine)

    async def create_schema(self) -> None:
        """Create the files table if it does not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Files table ready")

    async def ping(self) -> None:
        async with self._sf() as db:
            await db.execute(text("SELECT 1"))

    async def insert(self, display_name: str, storage_path: str) -> FileRecord:
        """Insert one record. id and uploaded_at are read back before the commit."""
        record = FileRecord(display_name=display_name, storage_path=storage_path)
        try:
            async with self._sf() as db:
                db.add(record)
                await db.flush()
                await db.refresh(record)
                await db.commit()
        except SQLAlchemyError as e:
            raise CatalogWriteError(f"Could not save file record: {e}") from e
        return record

    async def list_all(self) -> list[str]:
        """All display names in insertion order."""
        try:
            async with self._sf() as db:
                result = await db.execute(
                    select(FileRecord.display_name).order_by(FileRecord.id)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise CatalogReadError(f"Could not list files: {e}") from e

    async def find_by_name(self, display_name: str) -> FileRecord | None:
        """Lowest-id record with this display name, or None."""
        try:
            async with self._sf() as db:
                result = await db.execute(
                    select(FileRecord)
                    .where(FileRecord.display_name == display_name)
                    .order_by(FileRecord.id)
                    .limit(1)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise CatalogReadError(f"Could not look up {display_name!r}: {e}") from e

    async def delete_by_id(self, record_id: int) -> int:
        try:
            async with self._sf() as db:
                result = await db.execute(
                    delete(FileRecord).where(FileRecord.id == record_id)
                )
                await db.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise CatalogWriteError(f"Could not delete file record {record_id}: {e}") from e

    async def delete_by_name(self, display_name: str) -> int:
        """Delete only the record a name resolves to, leaving same-named rows alone."""
        record = await self.find_by_name(display_name)
        if record is None:
            return 0
        return await self.delete_by_id(record.id)

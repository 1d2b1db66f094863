from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import build_engine
from app.main import create_app
from app.services.blob_store import BlobStore
from app.services.catalog import MetadataCatalog
from app.services.file_service import FileService


@pytest.fixture
def blob_store(tmp_path) -> BlobStore:
    return BlobStore(tmp_path / "uploads")


@pytest_asyncio.fixture
async def catalog(tmp_path):
    """Catalog backed by a fresh SQLite file, with the files table created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.sqlite'}")
    catalog = MetadataCatalog(engine)
    await catalog.create_schema()
    yield catalog
    await engine.dispose()


@pytest.fixture
def service(blob_store, catalog) -> FileService:
    return FileService(blob_store, catalog)


@pytest.fixture
def stage(blob_store):
    """Write bytes into the staging area, the way the upload route does."""
    counter = iter(range(10_000))

    def _stage(content: bytes) -> Path:
        path = blob_store.staging_dir / f"upload-{next(counter)}"
        path.write_bytes(content)
        return path

    return _stage


@pytest.fixture
def api_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'api.sqlite'}",
        FILE_STORAGE_PATH=str(tmp_path / "api-uploads"),
    )


@pytest.fixture
def client(api_settings):
    with TestClient(create_app(api_settings)) as c:
        yield c

def upload(client, name: str, content: bytes):
    return client.post("/upload", files={"file": (name, content, "text/plain")})


def test_upload_list_download_delete(client):
    resp = upload(client, "a.txt", b"hello world")
    assert resp.status_code == 200
    assert resp.json() == {"success": 'File "a.txt" uploaded successfully.'}

    resp = client.get("/files")
    assert resp.status_code == 200
    assert resp.json() == {"files": ["a.txt"]}

    resp = client.get("/files/a.txt")
    assert resp.status_code == 200
    assert resp.content == b"hello world"
    assert 'filename="a.txt"' in resp.headers["content-disposition"]

    resp = client.delete("/files/a.txt")
    assert resp.status_code == 200
    assert resp.json() == {"success": 'File "a.txt" deleted successfully.'}

    assert client.get("/files").json() == {"files": []}
    resp = client.get("/files/a.txt")
    assert resp.status_code == 404
    assert "error" in resp.json()


def test_upload_without_file_field(client):
    resp = client.post("/upload", files={"other": ("a.txt", b"x", "text/plain")})

    assert resp.status_code == 400
    assert resp.json() == {"error": "No file uploaded."}


def test_upload_empty_file(client):
    resp = upload(client, "empty.txt", b"")

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert client.get("/files").json() == {"files": []}


def test_upload_leaves_no_staging_files(client):
    upload(client, "a.txt", b"hello")
    upload(client, "empty.txt", b"")

    staging_dir = client.app.state.file_service.blob_store.staging_dir
    assert list(staging_dir.iterdir()) == []


def test_download_missing(client):
    resp = client.get("/files/missing.txt")

    assert resp.status_code == 404
    assert resp.json() == {"error": 'File "missing.txt" not found.'}


def test_delete_missing(client):
    resp = client.delete("/files/missing.txt")

    assert resp.status_code == 404
    assert "error" in resp.json()


def test_duplicate_names_download_first(client):
    upload(client, "dup.txt", b"first")
    upload(client, "dup.txt", b"second")

    assert client.get("/files").json() == {"files": ["dup.txt", "dup.txt"]}
    assert client.get("/files/dup.txt").content == b"first"


def test_catalog_failure_returns_500(client, monkeypatch):
    from app.exceptions import CatalogWriteError

    catalog = client.app.state.file_service.catalog

    async def broken_insert(display_name, storage_path):
        raise CatalogWriteError()

    monkeypatch.setattr(catalog, "insert", broken_insert)

    resp = upload(client, "a.txt", b"hello")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Could not save to the database."}


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "connected"}


def test_disk_failure_while_receiving_upload(client, monkeypatch):
    from aiofiles.threadpool.binary import AsyncBufferedIOBase

    async def disk_full(self, data):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(AsyncBufferedIOBase, "write", disk_full)

    resp = upload(client, "a.txt", b"hello")

    assert resp.status_code == 500
    assert "error" in resp.json()
    staging_dir = client.app.state.file_service.blob_store.staging_dir
    assert list(staging_dir.iterdir()) == []
    assert client.get("/files").json() == {"files": []}


def test_upload_with_text_file_field(client):
    resp = client.post("/upload", data={"file": "not a file"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "No file uploaded."}


def test_blob_removal_failure_returns_500(client, monkeypatch):
    from app.exceptions import StorageWriteError

    upload(client, "a.txt", b"hello")
    blob_store = client.app.state.file_service.blob_store

    async def broken_remove(storage_path):
        raise StorageWriteError("Could not delete blob: permission denied")

    monkeypatch.setattr(blob_store, "remove", broken_remove)

    resp = client.delete("/files/a.txt")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Could not delete blob: permission denied"}
    assert client.get("/files").json() == {"files": ["a.txt"]}


def test_upload_uses_configured_chunk_size(api_settings, monkeypatch):
    from fastapi.testclient import TestClient
    from starlette.datastructures import UploadFile

    from app.main import create_app

    sizes = []
    original_read = UploadFile.read

    async def recording_read(self, size=-1):
        sizes.append(size)
        return await original_read(self, size)

    monkeypatch.setattr(UploadFile, "read", recording_read)
    settings = api_settings.model_copy(update={"UPLOAD_CHUNK_SIZE": 4})

    with TestClient(create_app(settings)) as c:
        resp = upload(c, "a.txt", b"hello world")
        assert resp.status_code == 200
        assert c.get("/files/a.txt").content == b"hello world"

    assert 4 in sizes

"""Files API routes."""
import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os
from fastapi import APIRouter, Depends, Request, UploadFile, File as FastAPIFile
from fastapi.responses import FileResponse

from app.exceptions import EmptyUploadError, StorageWriteError
from app.schemas.common import DeleteResponse
from app.schemas.file import ErrorResponse, FileListResponse, UploadResponse
from app.services.file_service import FileService

router = APIRouter(tags=["files"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_file_service(request: Request) -> FileService:
    """FastAPI dependency returning the service built at startup."""
    return request.app.state.file_service


async def _spool_to_staging(file: UploadFile, staged: Path, chunk_size: int) -> None:
    """Copy the multipart body into a staging file on the storage volume."""
    try:
        async with aiofiles.open(staged, "wb") as out:
            while chunk := await file.read(chunk_size):
                await out.write(chunk)
    except OSError as e:
        raise StorageWriteError(f"Could not receive upload: {e}") from e


@router.post("/upload", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload_file(
    request: Request,
    file: UploadFile | None = FastAPIFile(None),
    service: FileService = Depends(get_file_service),
):
    """Upload a file and create a file record."""
    if file is None:
        raise EmptyUploadError()

    display_name = file.filename or "unnamed"
    try:
        fd, name = tempfile.mkstemp(dir=service.blob_store.staging_dir)
        os.close(fd)
    except OSError as e:
        raise StorageWriteError(f"Could not receive upload: {e}") from e

    staged = Path(name)
    try:
        await _spool_to_staging(file, staged, request.app.state.settings.UPLOAD_CHUNK_SIZE)
        await service.upload(display_name, staged)
    finally:
        if await aiofiles.os.path.exists(staged):
            await aiofiles.os.remove(staged)

    return {"success": f'File "{display_name}" uploaded successfully.'}


@router.get("/files", response_model=FileListResponse, responses=ERROR_RESPONSES)
async def list_files(service: FileService = Depends(get_file_service)):
    """List stored filenames in upload order."""
    return {"files": await service.list_files()}


@router.get("/files/{filename}", responses=ERROR_RESPONSES)
async def download_file(
    filename: str,
    service: FileService = Depends(get_file_service),
):
    """Download a file by name."""
    stored = await service.download(filename)
    return FileResponse(
        path=stored.path,
        filename=stored.filename,
        media_type="application/octet-stream",
    )


@router.delete("/files/{filename}", response_model=DeleteResponse, responses=ERROR_RESPONSES)
async def delete_file(
    filename: str,
    service: FileService = Depends(get_file_service),
):
    """Delete a file and its record."""
    await service.delete(filename)
    return {"success": f'File "{filename}" deleted successfully.'}

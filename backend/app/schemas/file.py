"""File request/response schemas."""
from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: str


class FileListResponse(BaseModel):
    files: list[str]


class ErrorResponse(BaseModel):
    error: str

"""Shared Pydantic schemas."""
from pydantic import BaseModel


class DeleteResponse(BaseModel):
    success: str


class HealthResponse(BaseModel):
    status: str
    database: str

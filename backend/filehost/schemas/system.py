"""Health schemas."""

from pydantic import BaseModel


class StorageStatus(BaseModel):
    """Upload directory usage."""
    file_count: int
    used_bytes: int
    free_bytes: int
    total_bytes: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    service: str = "filehost"
    storage: StorageStatus

"""Health check with upload directory usage."""

from fastapi import APIRouter, Depends

from filehost import __version__
from filehost.api.deps import get_file_store
from filehost.schemas.system import HealthResponse, StorageStatus
from filehost.services.file_store import FileStore
from filehost.utils.storage import get_directory_stats, get_disk_usage

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(store: FileStore = Depends(get_file_store)):
    """Service version plus how much the upload directory holds."""
    file_count, used_bytes = get_directory_stats(store.root)
    disk = get_disk_usage(store.root)
    return HealthResponse(
        version=__version__,
        storage=StorageStatus(
            file_count=file_count,
            used_bytes=used_bytes,
            free_bytes=disk["free_bytes"],
            total_bytes=disk["total_bytes"],
        ),
    )


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}

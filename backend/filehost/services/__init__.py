"""Business logic services."""

from __future__ import annotations

from filehost.config import Settings
from filehost.services.file_store import FileStore


def build_file_store(settings: Settings) -> FileStore:
    """Create the file store described by ``settings``."""
    return FileStore(
        root=settings.upload_dir,
        url_prefix=settings.uploads_url_prefix,
        max_file_size=settings.max_file_size,
        allowed_extensions=settings.allowed_extensions,
    )

"""FastAPI dependency injection: settings and file store from app state."""

from __future__ import annotations

from fastapi import Request

from filehost.config import Settings
from filehost.services.file_store import FileStore


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_file_store(request: Request) -> FileStore:
    """The app's file store."""
    return request.app.state.file_store

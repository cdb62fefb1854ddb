"""File API routes for uploading, listing and deleting."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from filehost.api.deps import get_app_settings, get_file_store
from filehost.config import Settings
from filehost.exceptions import ClientInputError, InternalStorageError
from filehost.schemas.files import (
    DeleteAllResponse,
    FileListResponse,
    MessageResponse,
    MultiUploadResponse,
    UploadResponse,
)
from filehost.services.file_store import FileStore

logger = logging.getLogger(__name__)
router = APIRouter()

NO_FILE = "No file uploaded"


@router.get("/files", response_model=FileListResponse)
def list_files(store: FileStore = Depends(get_file_store)):
    """Every stored file, newest first."""
    try:
        files = store.list_files()
    except OSError as exc:
        raise InternalStorageError(str(exc)) from exc
    return FileListResponse(files=files)


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: UploadFile | None = File(None),
    store: FileStore = Depends(get_file_store),
):
    """Single upload in form field ``file``."""
    if file is None or not file.filename:
        raise ClientInputError(NO_FILE)
    try:
        stored = await store.save_upload(file)
    except OSError as exc:
        raise InternalStorageError(str(exc)) from exc
    return UploadResponse(file=stored)


@router.post("/upload-multiple", response_model=MultiUploadResponse)
async def upload_multiple(
    files: list[UploadFile] | None = File(None),
    settings: Settings = Depends(get_app_settings),
    store: FileStore = Depends(get_file_store),
):
    """Up to ``max_files`` uploads in form field ``files``, kept in field order."""
    uploads = [f for f in files or [] if f.filename]
    if not uploads:
        raise ClientInputError(NO_FILE)
    if len(uploads) > settings.max_files:
        raise ClientInputError(f"Too many files, at most {settings.max_files} per request")
    try:
        stored = await store.save_uploads(uploads)
    except OSError as exc:
        raise InternalStorageError(str(exc)) from exc
    return MultiUploadResponse(files=stored)


@router.delete("/files/{filename}", response_model=MessageResponse)
def delete_file(filename: str, store: FileStore = Depends(get_file_store)):
    """Remove one stored file by its on-disk name."""
    try:
        store.delete_file(filename)
    except OSError as exc:
        raise InternalStorageError(str(exc)) from exc
    return MessageResponse(message="File deleted")


@router.delete("/files", response_model=DeleteAllResponse)
def delete_all_files(store: FileStore = Depends(get_file_store)):
    """Remove everything in the upload directory."""
    try:
        deleted = store.delete_all()
    except OSError as exc:
        raise InternalStorageError(str(exc)) from exc
    logger.info("Upload directory cleared")
    return DeleteAllResponse(message="All files deleted", deleted=deleted)

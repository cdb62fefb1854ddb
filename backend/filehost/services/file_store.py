"""Filesystem-backed file store. The upload directory is the only source of truth.

No index is kept: every record is rebuilt from ``stat`` on demand, and there is
no locking. Concurrent writers are kept apart only by the unique-name rule.
"""

from __future__ import annotations

import logging
import os
import random
import time
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterable, Sequence

from fastapi import UploadFile

from filehost.exceptions import (
    ClientInputError,
    FileNotFoundInStoreError,
    InternalStorageError,
    PayloadTooLargeError,
)
from filehost.schemas.files import FileRecord, UploadedFile
from filehost.services.content_types import resolve_content_type

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MB
MAX_NAME_BYTES = 255  # NAME_MAX on common filesystems
_NAME_ATTEMPTS = 5


def _stat_time(st: os.stat_result) -> datetime:
    """Creation time where the platform records it, otherwise modification time."""
    ts = getattr(st, "st_birthtime", None) or st.st_mtime
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def client_basename(filename: str) -> str:
    """Strip any directory part a client put into its filename."""
    return PurePosixPath(filename.replace("\\", "/")).name


def _truncate_utf8(text: str, max_bytes: int) -> str:
    return text.encode("utf-8")[:max_bytes].decode("utf-8", "ignore")


def unique_name(original_name: str) -> str:
    """``<stem>-<epochMillis>-<random>`` with the original extension kept.

    The stem is shortened so the result fits in MAX_NAME_BYTES of UTF-8; an
    extension too long to fit alongside the suffix is dropped.
    """
    path = PurePosixPath(original_name)
    stem = path.stem or "file"
    ext = path.suffix
    tag = f"-{int(time.time() * 1000)}-{random.randrange(1_000_000_000)}"
    if len((tag + ext).encode("utf-8")) >= MAX_NAME_BYTES:
        ext = ""
    budget = MAX_NAME_BYTES - len((tag + ext).encode("utf-8"))
    return f"{_truncate_utf8(stem, budget)}{tag}{ext}"


class FileStore:
    """Upload, list and delete files inside a single directory."""

    def __init__(
        self,
        root: str | Path,
        url_prefix: str = "/uploads",
        max_file_size: int = 500 * 1024 * 1024,
        allowed_extensions: Iterable[str] = (),
    ) -> None:
        self.root = Path(root).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self.max_file_size = max_file_size
        self.allowed_extensions = frozenset(allowed_extensions)

    def ensure_directory(self) -> Path:
        """Create the upload directory (and parents) if missing. Errors propagate."""
        if not self.root.is_dir():
            self.root.mkdir(parents=True, exist_ok=True)
            logger.info("Created upload directory %s", self.root)
        return self.root

    def url_for(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def _record(self, name: str, st: os.stat_result) -> FileRecord:
        return FileRecord(
            name=name,
            size=st.st_size,
            upload_time=_stat_time(st),
            type=resolve_content_type(name),
            url=self.url_for(name),
        )

    def list_files(self) -> list[FileRecord]:
        """All entries, newest first. Ties keep directory enumeration order."""
        records: list[FileRecord] = []
        for path in self.root.iterdir():
            try:
                st = path.stat()
            except FileNotFoundError:
                continue  # deleted between iterdir() and stat()
            records.append(self._record(path.name, st))
        records.sort(key=lambda r: r.upload_time, reverse=True)
        return records

    def _too_large(self, per_file: bool) -> PayloadTooLargeError:
        mb = self.max_file_size // (1024 * 1024)
        if per_file:
            message = f"File too large, maximum size per file is {mb}MB"
        else:
            message = f"File too large, maximum size is {mb}MB"
        return PayloadTooLargeError(message, self.max_file_size)

    def _check_extension(self, original_name: str) -> None:
        if not self.allowed_extensions:
            return
        ext = PurePosixPath(original_name).suffix.lower()
        if ext not in self.allowed_extensions:
            raise ClientInputError(f"File type not allowed: {ext or original_name}")

    def _open_unique(self, original_name: str) -> tuple[Path, BinaryIO]:
        """Open a new file exclusively so an existing name is never overwritten."""
        for _ in range(_NAME_ATTEMPTS):
            try:
                target = self.root / unique_name(original_name)
                return target, target.open("xb")
            except FileExistsError:
                continue
            except ValueError:
                raise ClientInputError("Invalid filename") from None
        raise InternalStorageError(f"Could not allocate a unique name for {original_name}")

    async def _store(self, upload: UploadFile, per_file: bool) -> UploadedFile:
        original_name = client_basename(upload.filename or "")
        self._check_extension(original_name)

        if upload.size is not None and upload.size > self.max_file_size:
            raise self._too_large(per_file)

        target, out = self._open_unique(original_name)
        written = 0
        try:
            with out:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_file_size:
                        raise self._too_large(per_file)
                    out.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise

        # Re-stat so the response matches what listing reports
        record = self._record(target.name, target.stat())
        logger.info("Stored %s as %s (%d bytes)", original_name, target.name, record.size)
        return UploadedFile(
            name=record.name,
            original_name=original_name,
            size=record.size,
            upload_time=record.upload_time,
            type=upload.content_type or record.type,
            url=record.url,
        )

    async def save_upload(self, upload: UploadFile) -> UploadedFile:
        """Persist a single upload under a collision-avoiding name."""
        return await self._store(upload, per_file=False)

    async def save_uploads(self, uploads: Sequence[UploadFile]) -> list[UploadedFile]:
        """Persist several uploads in order; on failure, remove the ones already stored."""
        stored: list[UploadedFile] = []
        try:
            for upload in uploads:
                stored.append(await self._store(upload, per_file=True))
        except BaseException:
            self._discard(f.name for f in stored)
            raise
        return stored

    def _discard(self, names: Iterable[str]) -> None:
        for name in names:
            try:
                (self.root / name).unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not roll back %s: %s", name, exc)

    def _resolve(self, name: str) -> Path:
        """Join ``name`` onto the root, refusing anything that lands outside it."""
        candidate = Path(os.path.normpath(self.root / name))
        if candidate.parent != self.root or candidate.name in ("", ".", ".."):
            raise ClientInputError("Invalid filename")
        return candidate

    def delete_file(self, name: str) -> None:
        target = self._resolve(name)
        try:
            target.unlink()
        except FileNotFoundError:
            raise FileNotFoundInStoreError("File not found") from None
        except ValueError:
            raise ClientInputError("Invalid filename") from None
        logger.info("Deleted %s", target.name)

    def delete_all(self) -> int:
        """Remove every entry present when the sweep starts. Returns the count removed."""
        snapshot = list(self.root.iterdir())
        deleted = 0
        failures: list[str] = []
        for path in snapshot:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                failures.append(f"{path.name}: {exc.strerror or exc}")
                continue
            deleted += 1

        logger.info("Deleted %d of %d file(s)", deleted, len(snapshot))
        if failures:
            raise InternalStorageError(
                f"Failed to delete {len(failures)} file(s): " + "; ".join(failures)
            )
        return deleted

"""Exceptions raised by the file store and rendered by the API."""

from __future__ import annotations


class FileHostError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ClientInputError(FileHostError):
    """Request is missing uploads or names something it may not."""

    status_code = 400


class PayloadTooLargeError(FileHostError):
    """An uploaded file exceeds the per-file size cap."""

    status_code = 413

    def __init__(self, message: str, limit_bytes: int) -> None:
        """Initialize PayloadTooLargeError.

        Args:
            message: Client-facing error text.
            limit_bytes: Configured per-file cap that was exceeded.
        """
        super().__init__(message)
        self.limit_bytes = limit_bytes


class FileNotFoundInStoreError(FileHostError):
    """Named file does not exist in the storage directory."""

    status_code = 404


class InternalStorageError(FileHostError):
    """Any other filesystem failure; message is passed through."""

    status_code = 500

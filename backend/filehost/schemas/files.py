"""File schemas: camelCase JSON records derived from filesystem stat."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileRecord(_CamelModel):
    """Stored file as reported by listing."""
    name: str
    size: int
    upload_time: datetime
    type: str
    url: str


class UploadedFile(FileRecord):
    """Stored file plus the name the client sent."""
    original_name: str


class FileListResponse(_CamelModel):
    success: bool = True
    files: list[FileRecord]


class UploadResponse(_CamelModel):
    success: bool = True
    file: UploadedFile


class MultiUploadResponse(_CamelModel):
    success: bool = True
    files: list[UploadedFile]


class MessageResponse(_CamelModel):
    success: bool = True
    message: str


class DeleteAllResponse(MessageResponse):
    deleted: int


class ErrorResponse(_CamelModel):
    """Shape of every JSON error body."""
    success: bool = False
    error: str

"""filehost configuration: Pydantic BaseSettings loaded from .env."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

MiB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings. Defaults match the classic fixed values (port 3000, ./uploads)."""

    app_name: str = "filehost"
    debug: bool = False
    log_level: str = "INFO"

    # Network
    host: str = "0.0.0.0"
    port: int = 3000
    api_prefix: str = "/api"
    cors_origins: Annotated[list[str], NoDecode] = ["*"]
    shutdown_timeout: int = 1  # seconds uvicorn waits on in-flight requests

    # Storage (relative paths resolve against the working directory)
    upload_dir: str = "./uploads"
    uploads_url_prefix: str = "/uploads"
    static_dir: str = "."

    # Upload limits
    max_file_size: int = 500 * MiB  # per file, also in multi-upload
    max_files: int = 10
    allowed_extensions: Annotated[list[str], NoDecode] = []  # empty = accept everything

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILEHOST_",
        extra="ignore",
    )

    @field_validator("cors_origins", "allowed_extensions", mode="before")
    @classmethod
    def split_comma_list(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str) and not value.startswith("["):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_extensions(cls, value: list[str]) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value]

    @field_validator("uploads_url_prefix")
    @classmethod
    def normalize_prefix(cls, value: str) -> str:
        return "/" + value.strip("/")

    @property
    def max_file_size_mb(self) -> int:
        return self.max_file_size // MiB


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

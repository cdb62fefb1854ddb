"""Test fixtures: temporary upload directory and FastAPI test client."""

from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from filehost.config import Settings
from filehost.main import create_app
from filehost.services import build_file_store

MAX_TEST_FILE_SIZE = 64 * 1024  # 64 KB


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway upload dir and static root."""
    static_dir = tmp_path / "public"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>filehost</h1>")
    return Settings(
        _env_file=None,
        upload_dir=str(tmp_path / "uploads"),
        static_dir=str(static_dir),
        max_file_size=MAX_TEST_FILE_SIZE,
    )


@pytest.fixture
def upload_dir(settings: Settings) -> Path:
    return Path(settings.upload_dir)


@pytest.fixture
def store(settings: Settings):
    """A file store on the temporary upload dir."""
    file_store = build_file_store(settings)
    file_store.ensure_directory()
    return file_store


@pytest_asyncio.fixture
async def client(settings: Settings):
    """Provide an async test client around a freshly built app."""
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

"""filehost FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from filehost import __version__
from filehost.config import Settings, get_settings
from filehost.exceptions import FileHostError
from filehost.schemas.files import ErrorResponse
from filehost.services import build_file_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # === STARTUP ===
    settings: Settings = app.state.settings
    _setup_logging(settings)

    base_url = f"http://localhost:{settings.port}"
    logger.info("%s v%s started — listening on %s:%s", settings.app_name, __version__, settings.host, settings.port)
    logger.info("Upload directory: %s", app.state.file_store.root)
    logger.info("Max upload size: %dMB per file, %d files per request", settings.max_file_size_mb, settings.max_files)
    logger.info("Open: %s", base_url)
    logger.info("File list: %s%s/files", base_url, settings.api_prefix)

    static_dir = Path(settings.static_dir).resolve()
    if app.state.static_mounted:
        logger.info("Static assets mounted from %s", static_dir)
    else:
        logger.info("No static directory at %s — API-only mode", static_dir)

    try:
        yield
    finally:
        # === SHUTDOWN ===
        logger.info("%s shutting down", settings.app_name)


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Multipart parser logs every part at DEBUG
    for noisy in ("multipart", "python_multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FileHostError)
    async def _filehost_error(request: Request, exc: FileHostError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning("%s %s invalid: %s", request.method, request.url.path, detail)
        return _error_response(400, detail)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(500, str(exc))


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory. The storage directory is created here, before serving."""
    from filehost.api.routes import api_router

    settings = settings or get_settings()
    file_store = build_file_store(settings)
    file_store.ensure_directory()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )
    app.state.settings = settings
    app.state.file_store = file_store

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_error_handlers(app)

    # Mount API routes
    app.include_router(api_router, prefix=settings.api_prefix)

    # Stored files
    app.mount(
        settings.uploads_url_prefix,
        StaticFiles(directory=file_store.root),
        name="uploads",
    )

    # Static assets from the working directory; must stay last, it matches everything
    static_dir = Path(settings.static_dir).resolve()
    app.state.static_mounted = static_dir.is_dir()
    if app.state.static_mounted:
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def run(settings: Settings | None = None) -> None:
    import uvicorn

    settings = settings or get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )


if __name__ == "__main__":
    run()

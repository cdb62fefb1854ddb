"""Extension → MIME type lookup used when listing stored files."""

from pathlib import PurePath

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".js": "text/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".wav": "audio/wav",
    ".mp4": "video/mp4",
    ".woff": "application/font-woff",
    ".ttf": "application/font-ttf",
    ".eot": "application/vnd.ms-fontobject",
    ".otf": "application/font-otf",
    ".wasm": "application/wasm",
}


def resolve_content_type(filename: str) -> str:
    """Map a filename to its MIME type by extension (case-insensitive)."""
    ext = PurePath(filename).suffix.lower()
    return MIME_TYPES.get(ext, DEFAULT_CONTENT_TYPE)

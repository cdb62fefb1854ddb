"""Command-line entry point: ``python -m filehost`` / ``filehost``."""

from __future__ import annotations

import argparse

from filehost.config import get_settings
from filehost.main import run


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve a directory of uploaded files over HTTP.")
    parser.add_argument("--host", help="Bind address (default: FILEHOST_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Listen port (default: FILEHOST_PORT or 3000)")
    parser.add_argument("--upload-dir", help="Where uploads are stored (default: ./uploads)")
    parser.add_argument("--static-dir", help="Directory served at / (default: working directory)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    overrides = {
        key: value
        for key, value in vars(args).items()
        if value is not None
    }
    settings = get_settings().model_copy(update=overrides)
    run(settings)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

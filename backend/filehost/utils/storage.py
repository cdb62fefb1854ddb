"""Disk space utilities for the upload directory."""

import shutil
from pathlib import Path


def get_disk_usage(path: str | Path) -> dict:
    """Get disk usage of the filesystem holding the given path."""
    usage = shutil.disk_usage(str(path))
    return {
        "total_bytes": usage.total,
        "used_bytes": usage.used,
        "free_bytes": usage.free,
    }


def get_directory_stats(path: str | Path) -> tuple[int, int]:
    """Count regular files directly inside a directory and sum their sizes."""
    count = 0
    total = 0
    for f in Path(path).iterdir():
        try:
            if f.is_file():
                count += 1
                total += f.stat().st_size
        except FileNotFoundError:
            continue  # removed mid-scan
    return count, total

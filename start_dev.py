"""Convenience launcher for the filehost development server.

Usage:
    Windows: python start_dev.py [--port 3000]
    Linux:   python3 start_dev.py [--port 3000]

Runs Uvicorn with --reload against the app factory, using the backend
virtual environment when one exists. Run from the repository root: uploads
land in ./uploads and the repository root is served at /.
Press Ctrl+C to stop.
"""

from __future__ import annotations

import argparse
import os
import signal
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
BACKEND_DIR = ROOT_DIR / "backend"

VENV_PYTHON = ROOT_DIR / (
    ".venv\\Scripts\\python.exe" if os.name == "nt" else ".venv/bin/python"
)

# ANSI colors (disabled on Windows without VT support)
if os.name == "nt":
    os.system("")  # enable VT100 on Windows 10+

CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"


def log(level: str, msg: str) -> None:
    colors = {"info": CYAN, "start": GREEN, "stop": YELLOW, "error": RED}
    color = colors.get(level, "")
    print(f"{color}[{level}]{RESET} {msg}")


def resolve_python() -> str:
    """Prefer the project venv, fall back to the running interpreter."""
    if VENV_PYTHON.exists():
        return str(VENV_PYTHON)
    log("info", "No venv found, using system Python")
    return sys.executable


def check_dependencies(python: str) -> bool:
    """Verify critical packages are importable."""
    result = subprocess.run(
        [python, "-c", "import fastapi; import uvicorn"],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        log("error", "Missing dependencies. Run:")
        log("error", f"  cd {ROOT_DIR} && pip install -e '.[test]'")
        return False
    return True


def stop(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return
    log("stop", "uvicorn")
    try:
        if os.name == "nt":
            proc.send_signal(signal.CTRL_BREAK_EVENT)
        else:
            proc.send_signal(signal.SIGINT)
        proc.wait(timeout=10)
    except subprocess.TimeoutExpired:
        proc.kill()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--port", type=int, default=3000)
    args = parser.parse_args(argv)

    python = resolve_python()
    log("info", f"Python: {python}")
    if not check_dependencies(python):
        return 1

    os.environ.setdefault("FILEHOST_DEBUG", "true")
    os.environ.setdefault("FILEHOST_LOG_LEVEL", "DEBUG")
    os.environ["FILEHOST_PORT"] = str(args.port)
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(BACKEND_DIR), env.get("PYTHONPATH")]))

    cmd = [
        python,
        "-m",
        "uvicorn",
        "filehost.main:create_app",
        "--factory",
        "--reload",
        "--reload-dir",
        str(BACKEND_DIR),
        "--host",
        "0.0.0.0",
        "--port",
        str(args.port),
    ]
    log("start", " ".join(cmd))
    kwargs = {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP} if os.name == "nt" else {}
    proc = subprocess.Popen(cmd, cwd=ROOT_DIR, env=env, **kwargs)

    log("info", "")
    log("info", f"  Files:   http://localhost:{args.port}/api/files")
    log("info", f"  Health:  http://localhost:{args.port}/api/health")
    log("info", f"  Docs:    http://localhost:{args.port}/docs")
    log("info", "")
    log("info", "Press Ctrl+C to stop")

    try:
        return proc.wait() or 0
    except KeyboardInterrupt:
        print()
        log("info", "Ctrl+C received, shutting down...")
        return 0
    finally:
        stop(proc)


if __name__ == "__main__":
    raise SystemExit(main())

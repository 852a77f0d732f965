import subprocess
import os
from pathlib import Path


def ensure_default_db() -> None:
    """Build the demo DB when the default path is used and missing."""
    if os.getenv("DEFAULT_SQLITE_PATH"):
        return
    from scripts.make_demo_db import DEFAULT_PATH, ensure_demo_db

    ensure_demo_db(Path(DEFAULT_PATH))


def run_fastapi():
    """Run FastAPI backend on port 8000."""
    subprocess.run(
        [
            "uvicorn",
            "app.main:app",
            "--host",
            "0.0.0.0",
            "--port",
            os.getenv("PORT", "8000"),
            "--proxy-headers",
            "--workers",
            str(os.getenv("UVICORN_WORKERS", 1)),
        ],
        check=True,
    )


if __name__ == "__main__":
    print("[start] launching uvicorn...", flush=True)
    ensure_default_db()
    run_fastapi()

"""Launch the UniChat backend (FastAPI) with uvicorn."""
import os
import subprocess
import sys
from pathlib import Path


def main():
    root = Path(__file__).parent

    # Ensure data directory exists
    (root / "data").mkdir(parents=True, exist_ok=True)

    # Detect environment: DOCKER=1 env var means bind on all interfaces
    is_docker = os.environ.get("DOCKER", "0") == "1"
    host = "0.0.0.0" if is_docker else "127.0.0.1"
    port = os.environ.get("PORT", "8000")

    # Backend: no --reload in production (Docker)
    backend_cmd = [
        sys.executable, "-m", "uvicorn", "unichat.main:app",
        "--host", host, "--port", port,
    ]
    if not is_docker:
        backend_cmd.append("--reload")

    print(f"Starting UniChat backend on http://{host}:{port} ...")
    backend = subprocess.Popen(backend_cmd, cwd=str(root))

    try:
        backend.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        backend.terminate()
        backend.wait()


if __name__ == "__main__":
    main()

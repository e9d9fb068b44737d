"""Entry point for the explorer API server.

Usage:
    # Development (with auto-reload):
    API_RELOAD=true python api_main.py

    # Or directly with uvicorn:
    uvicorn mead.api.app:app --reload --host 0.0.0.0 --port 8000

Upstream services are read from CONDITIONS_API_BASE_URL and
GEOGRAPHY_API_BASE_URL.
"""

import os

import uvicorn

from mead.core.logging import configure_logging

configure_logging()

if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "false").lower() == "true"
    workers = int(os.getenv("API_WORKERS", "1"))

    # Sessions live in process memory; several workers need sticky routing
    uvicorn.run(
        "mead.api.app:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1,
    )

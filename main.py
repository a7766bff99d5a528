"""
main.py — CarbonTrack Application Entry Point
==============================================
This file launches the FastAPI application located in carbontrack/main.py.
Run from the project root with:

    uvicorn carbontrack.main:app --reload --host 0.0.0.0 --port 8000

Or simply:
    python main.py
"""

import uvicorn

from carbontrack.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "carbontrack.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=True,
        log_level="info",
    )

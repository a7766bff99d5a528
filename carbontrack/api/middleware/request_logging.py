"""
CarbonTrack – Request Logging Middleware
=========================================
Attaches a unique correlation-ID to every request, logs it with timing,
and echoes the ID in the response headers.

Usage in main.py:
    from carbontrack.api.middleware.request_logging import RequestLoggingMiddleware
    app.add_middleware(RequestLoggingMiddleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every HTTP request with:
      - Unique Correlation-ID  (X-Correlation-ID header)
      - HTTP method + path + status code
      - Response time in ms
      - Client IP
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        # Propagate the caller's correlation ID or mint a short one
        corr_id = request.headers.get("X-Correlation-ID") or uuid.uuid4().hex[:12]

        # Bind to Loguru context for this request
        with logger.contextualize(request_id=corr_id):
            t0 = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception("Unhandled exception in request {}: {}", corr_id, exc)
                response = JSONResponse(
                    status_code=500,
                    content={"error": "Internal Server Error", "request_id": corr_id},
                )

            elapsed_ms = round((time.perf_counter() - t0) * 1000, 2)
            path = request.url.path

            # Skip noisy health pings from logs
            if not path.startswith("/api/v1/health"):
                logger.info(
                    "{method} {path} → {status} ({ms}ms) [{cid}] client={ip}",
                    method = request.method,
                    path   = path,
                    status = response.status_code,
                    ms     = elapsed_ms,
                    cid    = corr_id,
                    ip     = request.client.host if request.client else "unknown",
                )

            response.headers["X-Correlation-ID"] = corr_id
            response.headers["X-Response-Time-Ms"] = str(elapsed_ms)
            return response

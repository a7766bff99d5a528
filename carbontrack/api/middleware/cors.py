"""
CarbonTrack – Permissive CORS Middleware
=========================================
Answers every OPTIONS pre-flight with 200, an empty body and the CORS
headers, whatever the request carries, and adds the same headers to every
other response so the dashboard can call the API from the browser.
Starlette's CORSMiddleware only answers OPTIONS carrying Origin and
Access-Control-Request-Method, and with an "OK" body.
"""

from __future__ import annotations

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

ALLOWED_HEADERS = (
    "authorization, x-client-info, apikey, content-type, x-correlation-id, "
    "x-supabase-client-platform, x-supabase-client-platform-version, "
    "x-supabase-client-runtime, x-supabase-client-runtime-version"
)
ALLOWED_METHODS = "GET, POST, OPTIONS"
EXPOSED_HEADERS = "X-Correlation-ID, X-Response-Time-Ms, X-Prediction-Source"


class PermissiveCORSMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, allow_origins: list[str] | None = None) -> None:
        super().__init__(app)
        self.allow_origins = allow_origins or ["*"]
        self.allow_all = "*" in self.allow_origins

    def cors_headers(self, request: Request) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Expose-Headers": EXPOSED_HEADERS,
        }
        if self.allow_all:
            headers["Access-Control-Allow-Origin"] = "*"
        else:
            origin = request.headers.get("origin")
            if origin in self.allow_origins:
                headers["Access-Control-Allow-Origin"] = origin
                headers["Vary"] = "Origin"
        return headers

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.cors_headers(request))

        response = await call_next(request)
        response.headers.update(self.cors_headers(request))
        return response

"""
CarbonTrack – Health Check Endpoints
=====================================
Liveness and readiness checks for a load balancer or uptime monitor.

  GET /api/v1/health           → simple liveness (fast, no I/O)
  GET /api/v1/health/ready     → readiness (AI gateway credential present)
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from carbontrack import __version__
from carbontrack.config import settings

router = APIRouter()

# Process start for uptime
_START = time.time()


# ─────────────────────────────────────────────────────────────────────────────
# Schemas
# ─────────────────────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status:      str
    service:     str
    environment: str
    timestamp:   str
    version:     str = __version__
    uptime_s:    float = 0.0


class ComponentHealth(BaseModel):
    name:    str
    status:  str   # ok | failed
    detail:  str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _check_ai_gateway() -> ComponentHealth:
    """The gateway is usable only with a credential; no call is made."""
    if not settings.ai_configured:
        return ComponentHealth(
            name="ai_gateway", status="failed",
            detail="AI_API_KEY is not configured",
        )
    return ComponentHealth(
        name="ai_gateway", status="ok",
        detail=f"{settings.ai_model} via {settings.ai_base_url}",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@router.get("", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    """Returns 200 as long as the process is alive."""
    return HealthResponse(
        status      = "healthy",
        service     = settings.app_name,
        environment = settings.app_env,
        timestamp   = datetime.now(timezone.utc).isoformat(),
        uptime_s    = round(time.time() - _START, 1),
    )


@router.get("/ready", summary="Readiness probe")
async def readiness_check() -> JSONResponse:
    """Returns 503 until the AI gateway credential is configured."""
    gateway = _check_ai_gateway()
    ready   = gateway.status == "ok"
    code    = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code = code,
        content = {
            "ready":      ready,
            "ai_gateway": gateway.model_dump(),
            "timestamp":  datetime.now(timezone.utc).isoformat(),
        },
    )

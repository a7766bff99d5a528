"""
CarbonTrack – Application Entry Point
======================================
Bootstraps the FastAPI server, configures logging via Loguru,
sets up middleware, mounts routers, and wires up lifespan events.

Run:
    uvicorn carbontrack.main:app --reload          # development
    uvicorn carbontrack.main:app --workers 4        # production
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from carbontrack import __version__
from carbontrack.api.middleware.cors import PermissiveCORSMiddleware
from carbontrack.api.middleware.request_logging import RequestLoggingMiddleware
from carbontrack.api.routes import health, predict
from carbontrack.config import settings
from carbontrack.core.errors import ConfigurationError, InvalidInput, PredictionError

REQUIRED_METRICS = {"energy_consumption", "fuel_usage"}


# ─────────────────────────────────────────────────────────────────────────────
# Logging setup (Loguru)
# ─────────────────────────────────────────────────────────────────────────────
def _configure_logging() -> None:
    """Remove default Loguru sink, add console + rotating file sink."""
    logger.remove()

    fmt_console = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{line}</cyan> – {message}"
    )
    logger.add(sys.stderr, format=fmt_console, level=settings.log_level, colorize=True)

    # Rotating file
    logger.add(
        settings.log_file,
        level=settings.log_level,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=not settings.is_production,  # hide locals in production
    )

    logger.info(
        "Logging initialised | env={} | level={}",
        settings.app_env,
        settings.log_level,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Lifespan – startup / shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.
    Code before `yield` runs on startup; code after `yield` runs on shutdown.
    """
    _configure_logging()
    logger.info("🌿 Starting up {}…", settings.app_name)

    # A deployment without a gateway credential must not start
    try:
        service = predict.get_prediction_service()
    except ConfigurationError as exc:
        logger.critical("❌ {}", exc.message)
        raise
    logger.info("✅ Prediction service ready | model={} gateway={}", service.model, settings.ai_base_url)

    logger.info("🚀 {} is live on {}:{}", settings.app_name, settings.app_host, settings.app_port)

    yield

    logger.info("👋 {} stopped.", settings.app_name)


# ─────────────────────────────────────────────────────────────────────────────
# Error rendering
# ─────────────────────────────────────────────────────────────────────────────
async def _prediction_error_handler(request: Request, exc: PredictionError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Prediction error: {}", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies keep the {"error": ...} shape: 400 for an unusable required metric, else 500."""
    errors = exc.errors()
    fields = [str(err["loc"][-1]) for err in errors if err.get("loc")]
    logger.warning("Rejected request body: {}", [(err.get("type"), err.get("loc")) for err in errors])

    if any(field in REQUIRED_METRICS for field in fields):
        return JSONResponse(status_code=InvalidInput.status_code, content={"error": InvalidInput.default_message})
    if any(err.get("type") == "json_invalid" for err in errors):
        return JSONResponse(status_code=500, content={"error": "Invalid JSON body"})
    invalid = ", ".join(sorted(set(fields))) or "body"
    return JSONResponse(status_code=500, content={"error": f"Invalid value for {invalid}"})


# ─────────────────────────────────────────────────────────────────────────────
# FastAPI application factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Carbon-emissions prediction service. Converts industrial operational "
            "data into a CO₂ estimate with confidence and mitigation suggestions."
        ),
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_exception_handler(PredictionError, _prediction_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    # ── Request Logging Middleware (added before CORS so CORS wraps it) ──────
    app.add_middleware(RequestLoggingMiddleware)

    # ── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(PermissiveCORSMiddleware, allow_origins=settings.cors_origins)

    # ── API Routers ───────────────────────────────────────────────────────────
    app.include_router(health.router,  prefix="/api/v1/health",           tags=["Health"])
    app.include_router(predict.router, prefix="/api/v1/predict-emissions", tags=["Prediction"])

    return app


# ── Create module-level app instance (used by uvicorn) ───────────────────────
app = create_app()


# ─────────────────────────────────────────────────────────────────────────────
# Dev convenience runner
# ─────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "carbontrack.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
        log_level=settings.log_level.lower(),
    )

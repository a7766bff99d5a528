"""
CarbonTrack – Emission Prediction Router
=========================================
POST /api/v1/predict-emissions  → CO₂ estimate, confidence, 3 suggestions

Errors are raised as ``PredictionError`` subclasses and rendered as
``{"error": ...}`` by the handler registered in ``main.py``.  CORS pre-flight
is answered by ``PermissiveCORSMiddleware`` before reaching this router.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, Response

from carbontrack.api.schemas.prediction import ErrorResponse, PredictionRequest, PredictionResult
from carbontrack.config import settings
from carbontrack.services.prediction_service import PredictionService

router = APIRouter()


@lru_cache(maxsize=1)
def get_prediction_service() -> PredictionService:
    """Build the service once; raises ConfigurationError when no credential is set."""
    return PredictionService.from_settings(settings)


@router.post(
    "",
    response_model=PredictionResult,
    summary="Predict CO₂ emissions from operational metrics",
    responses={
        400: {"model": ErrorResponse},
        402: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def predict_emissions(
    body: PredictionRequest,
    response: Response,
    service: PredictionService = Depends(get_prediction_service),
) -> PredictionResult:
    """
    Estimate CO₂ output in metric tons.

    The model's answer is used when it parses; otherwise the emission-factor
    fallback fills in.  ``X-Prediction-Source`` tells which one it was.
    """
    outcome = await service.evaluate(body)
    response.headers["X-Prediction-Source"] = outcome.source
    return outcome.result

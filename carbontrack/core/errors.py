"""
CarbonTrack – Prediction Error Taxonomy
========================================
Every failure the prediction endpoint can surface to a caller.  Each class
carries the HTTP status and the short user-facing message rendered as
``{"error": message}`` by the exception handler in ``main.py``.

Parse failures of the model reply are not listed here: they never leave the
service and are resolved by the emission-factor fallback.
"""

from __future__ import annotations


class PredictionError(Exception):
    """Base class for errors rendered as ``{"error": ...}`` responses."""

    status_code: int = 500
    default_message: str = "Prediction failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(PredictionError):
    """Required operational metrics are missing or zero."""

    status_code = 400
    default_message = "Energy consumption and fuel usage are required"


class ConfigurationError(PredictionError):
    """The AI gateway credential is not configured."""

    status_code = 500
    default_message = "AI_API_KEY is not configured"


class RateLimited(PredictionError):
    status_code = 429
    default_message = "Rate limits exceeded, please try again later."


class PaymentRequired(PredictionError):
    status_code = 402
    default_message = "Payment required, please add funds to your workspace."


class UpstreamError(PredictionError):
    """The gateway answered with a non-success status, no content, or not at all."""

    status_code = 500
    default_message = "AI gateway error"

    def __init__(
        self,
        message: str | None = None,
        *,
        upstream_status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body

"""
services/prediction_service.py
===============================
Emission-prediction service.

Validates operational metrics, asks an OpenAI-compatible chat-completion
gateway for a CO₂ estimate, and resolves unparseable replies with the
emission-factor fallback.  Gateway failures (rate limit, billing, other HTTP
errors) are surfaced to the caller and never trigger the fallback.

    Received → Validated → model call → Parsed | Fallback → Responded
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Union

import httpx
from loguru import logger
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, RateLimitError
from pydantic import ValidationError

from carbontrack.api.schemas.prediction import PredictionRequest, PredictionResult
from carbontrack.config import AppSettings
from carbontrack.core.errors import (
    ConfigurationError,
    InvalidInput,
    PaymentRequired,
    RateLimited,
    UpstreamError,
)
from carbontrack.features.emission_factors import fallback_estimate
from carbontrack.features.prompt_builder import build_messages

# Leading ```json (any language tag) and trailing ```
_CODE_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n?|\n?[ \t]*```$")


# ─────────────────────────────────────────────────────────────────────────────
# Outcomes
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Parsed:
    """The model reply parsed into a valid result."""
    result: PredictionResult
    source: Literal["model"] = "model"


@dataclass(frozen=True)
class Fallback:
    """The model reply was unusable; the result comes from emission factors."""
    result: PredictionResult
    raw_content: str
    source: Literal["fallback"] = "fallback"


PredictionOutcome = Union[Parsed, Fallback]


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def validate_request(request: PredictionRequest) -> None:
    """Energy and fuel must be present and non-zero."""
    if not request.energy_consumption or not request.fuel_usage:
        raise InvalidInput()


def strip_code_fence(content: str) -> str:
    return _CODE_FENCE_RE.sub("", content.strip()).strip()


def parse_prediction(content: str) -> Optional[PredictionResult]:
    """Return the parsed result, or None when the reply has the wrong shape."""
    cleaned = strip_code_fence(content)
    try:
        return PredictionResult.model_validate_json(cleaned)
    except ValidationError as exc:
        logger.warning(
            "Failed to parse AI response ({} errors): {!r}",
            exc.error_count(), content[:500],
        )
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Service
# ─────────────────────────────────────────────────────────────────────────────

class PredictionService:
    """
    Stateless prediction service bound to one gateway credential.

    Usage:
        svc = PredictionService.from_settings(settings)
        result = await svc.predict(PredictionRequest(energy_consumption=15000, fuel_usage=5000))
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str,
        model: str,
        temperature: float = 0.3,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError()

        self.model = model
        self.temperature = temperature
        # Retries are the caller's decision
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "PredictionService":
        return cls(
            settings.ai_api_key,
            base_url=settings.ai_base_url,
            model=settings.ai_model,
            temperature=settings.ai_temperature,
        )

    async def predict(self, request: PredictionRequest) -> PredictionResult:
        outcome = await self.evaluate(request)
        return outcome.result

    async def evaluate(self, request: PredictionRequest) -> PredictionOutcome:
        """Run the full pipeline and report which branch produced the result."""
        logger.info("Prediction request: {}", request.model_dump(exclude_none=True))
        validate_request(request)

        content = await self._complete(request)
        logger.debug("AI response content: {}", content)

        parsed = parse_prediction(content)
        if parsed is None:
            outcome: PredictionOutcome = Fallback(fallback_estimate(request), raw_content=content)
        else:
            outcome = Parsed(parsed)

        logger.info(
            "Prediction result | source={} co2={}t confidence={}",
            outcome.source, outcome.result.predicted_co2, outcome.result.confidence,
        )
        return outcome

    async def _complete(self, request: PredictionRequest) -> str:
        """Single chat-completion call; returns the first choice's text."""
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=build_messages(request),
                temperature=self.temperature,
            )
        except RateLimitError as exc:
            logger.warning("AI gateway rate limited: {}", exc.message)
            raise RateLimited() from exc
        except APIStatusError as exc:
            if exc.status_code == 402:
                logger.warning("AI gateway payment required: {}", exc.message)
                raise PaymentRequired() from exc
            body = exc.response.text
            logger.error("AI gateway error: {} {}", exc.status_code, body)
            raise UpstreamError(
                f"AI gateway error: {exc.status_code}",
                upstream_status=exc.status_code,
                body=body,
            ) from exc
        except APIConnectionError as exc:
            logger.error("AI gateway unreachable: {}", exc)
            raise UpstreamError("AI gateway unreachable") from exc

        choices = completion.choices or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not content:
            raise UpstreamError("No content in AI response")
        return content

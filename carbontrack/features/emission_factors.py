"""
CarbonTrack – Emission Factors & Fallback Estimate
===================================================
Fixed conversion constants from operational quantities to CO₂ mass, and the
deterministic estimate used whenever the model reply cannot be parsed.

Factors (kg CO₂ per unit):
  ─ Electricity (grid average) : 0.5  per kWh
  ─ Diesel fuel               : 2.68 per liter
  ─ Natural gas               : 2.0  per m³
  ─ Waste decomposition       : 0.5  per kg

The fallback only uses energy, fuel and waste.  Production volume, water
usage and industry type are context for the model and are intentionally
left out of the formula.
"""

from __future__ import annotations

from loguru import logger

from carbontrack.api.schemas.prediction import PredictionRequest, PredictionResult
from carbontrack.core.rounding import round_half_up

# ─────────────────────────────────────────────────────────────────────────────
# Emission factors (kg CO₂ per unit)
# ─────────────────────────────────────────────────────────────────────────────
ELECTRICITY_KG_PER_KWH   = 0.5
DIESEL_KG_PER_LITER      = 2.68
NATURAL_GAS_KG_PER_M3    = 2.0
WASTE_KG_PER_KG          = 0.5

# Metric tons of CO₂ per unit, as used by the fallback formula
ELECTRICITY_T_PER_KWH = 0.0005
DIESEL_T_PER_LITER    = 0.00268
WASTE_T_PER_KG        = 0.0005

FALLBACK_CONFIDENCE = "Medium"

FALLBACK_SUGGESTIONS = (
    "Transition to renewable energy sources to reduce electricity-related emissions",
    "Implement fuel efficiency programs and consider electric vehicle alternatives",
    "Develop a comprehensive waste reduction and recycling program",
)


def fallback_estimate(request: PredictionRequest) -> PredictionResult:
    """
    Emission-factor estimate for an already validated request.

    Pure arithmetic: identical input always yields an identical result.
    """
    energy_emission = request.energy_consumption * ELECTRICITY_T_PER_KWH
    fuel_emission   = request.fuel_usage * DIESEL_T_PER_LITER
    waste_emission  = (request.waste_generated or 0) * WASTE_T_PER_KG

    total = energy_emission + fuel_emission + waste_emission

    # Negative readings would otherwise produce a negative tonnage
    predicted = round_half_up(max(total, 0.0))

    logger.debug(
        "Fallback estimate | energy={:.4f}t fuel={:.4f}t waste={:.4f}t total={}t",
        energy_emission, fuel_emission, waste_emission, predicted,
    )
    return PredictionResult(
        predicted_co2=predicted,
        confidence=FALLBACK_CONFIDENCE,
        suggestions=list(FALLBACK_SUGGESTIONS),
    )

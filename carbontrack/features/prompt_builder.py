"""
CarbonTrack – Prediction Prompt Builder
========================================
Formats operational metrics and the emission-factor table into the chat
messages sent to the model.
"""

from __future__ import annotations

from carbontrack.api.schemas.prediction import PredictionRequest
from carbontrack.features.emission_factors import (
    DIESEL_KG_PER_LITER,
    ELECTRICITY_KG_PER_KWH,
    NATURAL_GAS_KG_PER_M3,
    WASTE_KG_PER_KG,
)

SYSTEM_PROMPT = (
    "You are an expert environmental scientist specializing in carbon emissions analysis. "
    "Always respond with valid JSON only, no markdown formatting."
)


def _fmt(value: float) -> str:
    """Render 15000.0 as '15000' and keep fractional readings as-is."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def build_prompt(request: PredictionRequest) -> str:
    lines = [
        f"- Energy Consumption: {_fmt(request.energy_consumption)} kWh",
        f"- Fuel Usage: {_fmt(request.fuel_usage)} liters",
    ]
    # Optional context only when a non-zero reading was supplied
    if request.production_volume:
        lines.append(f"- Production Volume: {_fmt(request.production_volume)} units")
    if request.waste_generated:
        lines.append(f"- Waste Generated: {_fmt(request.waste_generated)} kg")
    if request.water_usage:
        lines.append(f"- Water Usage: {_fmt(request.water_usage)} m³")
    if request.industry_type:
        lines.append(f"- Industry Type: {request.industry_type}")

    input_block = "\n".join(lines)

    return f"""You are an expert environmental scientist and carbon emissions analyst. Based on the following industrial operational data, predict the CO2 emissions in metric tons.

Input Data:
{input_block}

Use these emission factors for calculation:
- Electricity: ~{ELECTRICITY_KG_PER_KWH} kg CO2 per kWh (grid average)
- Diesel fuel: ~{DIESEL_KG_PER_LITER} kg CO2 per liter
- Natural gas: ~{NATURAL_GAS_KG_PER_M3} kg CO2 per m³
- Waste decomposition: ~{WASTE_KG_PER_KG} kg CO2 per kg waste

Calculate the total CO2 emissions and provide:
1. The predicted CO2 emission value in metric tons (rounded to 2 decimal places)
2. Your confidence level (High, Medium, or Low)
3. 3 specific recommendations to reduce emissions

Respond ONLY with valid JSON in this exact format, without markdown code fences or any other text:
{{
  "predicted_co2": <number>,
  "confidence": "<High|Medium|Low>",
  "suggestions": ["<suggestion1>", "<suggestion2>", "<suggestion3>"]
}}"""


def build_messages(request: PredictionRequest) -> list[dict[str, str]]:
    """System + user message pair for the chat-completion call."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_prompt(request)},
    ]

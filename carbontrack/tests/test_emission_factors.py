"""
tests/test_emission_factors.py
===============================
Unit tests for the fallback estimate and the prompt builder.

Run with:
    pytest carbontrack/tests/ -v
"""

import pytest

from carbontrack.api.schemas.prediction import PredictionRequest
from carbontrack.core.rounding import round_half_up
from carbontrack.features.emission_factors import FALLBACK_SUGGESTIONS, fallback_estimate
from carbontrack.features.prompt_builder import SYSTEM_PROMPT, build_messages, build_prompt


# ─────────────────────────────────────────────────────────────────────────────
# Fallback estimate
# ─────────────────────────────────────────────────────────────────────────────

def test_fallback_energy_and_fuel_only():
    """15000 kWh + 5000 l → 7.5 t + 13.4 t = 20.90 t."""
    result = fallback_estimate(PredictionRequest(energy_consumption=15000, fuel_usage=5000))
    assert result.predicted_co2 == 20.9
    assert result.confidence == "Medium"
    assert result.suggestions == list(FALLBACK_SUGGESTIONS)
    assert len(result.suggestions) == 3


def test_fallback_includes_waste():
    request = PredictionRequest(energy_consumption=15000, fuel_usage=5000, waste_generated=2000)
    assert fallback_estimate(request).predicted_co2 == 21.9


def test_fallback_ignores_context_only_fields():
    base = PredictionRequest(energy_consumption=1234.5, fuel_usage=321)
    enriched = PredictionRequest(
        energy_consumption=1234.5,
        fuel_usage=321,
        production_volume=99999,
        water_usage=4000,
        industry_type="cement",
    )
    assert fallback_estimate(enriched) == fallback_estimate(base)


def test_fallback_rounds_to_two_decimals():
    result = fallback_estimate(PredictionRequest(energy_consumption=1234.5, fuel_usage=321))
    assert result.predicted_co2 == round_half_up(1234.5 * 0.0005 + 321 * 0.00268)


@pytest.mark.parametrize(
    "energy, fuel, expected",
    [
        (4, 225, 0.61),     # 0.002 + 0.603 = 0.605
        (16, 275, 0.75),    # 0.008 + 0.737 = 0.745
    ],
)
def test_fallback_rounds_ties_half_up(energy, fuel, expected):
    result = fallback_estimate(PredictionRequest(energy_consumption=energy, fuel_usage=fuel))
    assert result.predicted_co2 == expected


@pytest.mark.parametrize(
    "value, expected",
    [(0.605, 0.61), (0.745, 0.75), (20.9, 20.9), (21.3749, 21.37), (0.0, 0.0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_fallback_is_deterministic():
    request = PredictionRequest(energy_consumption=777.7, fuel_usage=55.5, waste_generated=12)
    first = fallback_estimate(request)
    second = fallback_estimate(request)
    assert first.model_dump() == second.model_dump()


def test_fallback_never_negative():
    result = fallback_estimate(PredictionRequest(energy_consumption=-50000, fuel_usage=1))
    assert result.predicted_co2 == 0.0


# ─────────────────────────────────────────────────────────────────────────────
# Prompt builder
# ─────────────────────────────────────────────────────────────────────────────

def test_prompt_embeds_inputs_and_factors():
    prompt = build_prompt(PredictionRequest(energy_consumption=15000, fuel_usage=5000.5))
    assert "- Energy Consumption: 15000 kWh" in prompt
    assert "- Fuel Usage: 5000.5 liters" in prompt
    for factor in ("0.5 kg CO2 per kWh", "2.68 kg CO2 per liter", "2.0 kg CO2 per m³", "0.5 kg CO2 per kg waste"):
        assert factor in prompt
    assert '"predicted_co2"' in prompt


def test_prompt_omits_absent_optional_fields():
    prompt = build_prompt(PredictionRequest(energy_consumption=1, fuel_usage=1, waste_generated=0))
    assert "Production Volume" not in prompt
    assert "Waste Generated" not in prompt
    assert "Water Usage" not in prompt
    assert "Industry Type" not in prompt


def test_prompt_includes_supplied_optional_fields():
    prompt = build_prompt(PredictionRequest(
        energy_consumption=1,
        fuel_usage=1,
        production_volume=250,
        waste_generated=80,
        water_usage=12.5,
        industry_type="textiles",
    ))
    assert "- Production Volume: 250 units" in prompt
    assert "- Waste Generated: 80 kg" in prompt
    assert "- Water Usage: 12.5 m³" in prompt
    assert "- Industry Type: textiles" in prompt


def test_messages_are_system_then_user():
    messages = build_messages(PredictionRequest(energy_consumption=1, fuel_usage=1))
    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == SYSTEM_PROMPT
    assert "JSON only" in SYSTEM_PROMPT

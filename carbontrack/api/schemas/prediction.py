from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from carbontrack.core.rounding import round_half_up


class PredictionRequest(BaseModel):
    """Operational metrics for one emissions record."""

    model_config = ConfigDict(
        allow_inf_nan=False,
        json_schema_extra={
            "example": {
                "energy_consumption": 15000,
                "fuel_usage": 5000,
                "production_volume": 1200,
                "waste_generated": 800,
                "water_usage": 350,
                "industry_type": "manufacturing",
            }
        },
    )

    # Required in practice; presence is checked by the prediction service
    energy_consumption: Optional[float] = Field(None, description="Energy consumption in kWh")
    fuel_usage: Optional[float] = Field(None, description="Fuel usage in liters")

    production_volume: Optional[float] = Field(None, description="Units produced")
    waste_generated: Optional[float] = Field(None, description="Waste generated in kg")
    water_usage: Optional[float] = Field(None, description="Water usage in m³")
    industry_type: Optional[str] = None


class PredictionResult(BaseModel):
    predicted_co2: float = Field(..., ge=0, allow_inf_nan=False, description="Metric tons of CO₂")
    confidence: Literal["High", "Medium", "Low"]
    suggestions: List[str] = Field(..., min_length=3, max_length=3)

    @field_validator("predicted_co2")
    @classmethod
    def round_predicted_co2(cls, v: float) -> float:
        return round_half_up(v)


class ErrorResponse(BaseModel):
    error: str

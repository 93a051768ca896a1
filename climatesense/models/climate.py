"""Climate profile models for ClimateSense.

This module defines the climate summary returned by the design service for
a site location, plus the form input that starts a design session.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class DesignPriority(str, Enum):
    """Primary optimization goal selected by the user."""

    DAYLIGHT = "daylight"
    COOLING = "cooling"
    VENTILATION = "ventilation"


DEFAULT_PLOT_DIMENSIONS = "15m x 20m"
DEFAULT_REQUIREMENTS = "3 bedrooms, open plan living, focus on eco-materials."


# =============================================================================
# CLIMATE DATA
# =============================================================================


class AverageTemperature(BaseModel):
    """Typical yearly temperature range in degrees Celsius."""

    model_config = ConfigDict(frozen=True)

    min: float = Field(..., description="Average low (°C)")
    max: float = Field(..., description="Average high (°C)")

    @model_validator(mode="after")
    def validate_range(self) -> "AverageTemperature":
        """Ensure the low does not exceed the high."""
        if self.min > self.max:
            raise ValueError(f"Temperature min {self.min} exceeds max {self.max}")
        return self


class ClimateData(BaseModel):
    """Climate profile and passive-design guidance for a location."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    location: str = Field(..., description="Location label")
    climate_zone: str = Field(..., alias="climateZone", description="Climate zone label")
    average_temp: AverageTemperature = Field(..., alias="averageTemp")
    solar_potential: str = Field(..., alias="solarPotential")
    prevailing_winds: str = Field(..., alias="prevailingWinds")
    climate_challenges: List[str] = Field(default_factory=list)
    design_strategies: List[str] = Field(default_factory=list)
    orientation_guidance: str = Field(..., description="Orientation logic")
    window_guidance: str = Field(..., description="Fenestration strategy")
    zoning_guidance: str = Field(..., description="Thermal zoning")


# =============================================================================
# FORM INPUT
# =============================================================================


class DesignRequest(BaseModel):
    """Project parameters entered in the design form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    location: str = Field(default="", description="Site location (city or region)")
    plot_dimensions: str = Field(
        default=DEFAULT_PLOT_DIMENSIONS,
        alias="plotDimensions",
        description="Plot dimensions, free text",
    )
    priority: DesignPriority = Field(default=DesignPriority.DAYLIGHT.value)
    requirements: str = Field(default=DEFAULT_REQUIREMENTS, description="Brief (rooms/style)")

    @field_validator("location", "plot_dimensions", "requirements", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def has_location(self) -> bool:
        return bool(self.location)

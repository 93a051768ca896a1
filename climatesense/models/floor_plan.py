"""Floor plan Pydantic models for ClimateSense.

This module defines the layout returned by the design service: rooms with
window placements, aggregate performance scores, rejected alternatives and
the climate diagnostics bundle (heat risk, airflow, daylight).

Diagnostic entries reference rooms by free-text label. They may also carry
the room id, which the renderer prefers over name matching.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class RoomType(str, Enum):
    """Room categories used for zoning and coloring."""

    LIVING = "living"
    BEDROOM = "bedroom"
    KITCHEN = "kitchen"
    BATHROOM = "bathroom"
    UTILITY = "utility"
    BUFFER = "buffer"
    CIRCULATION = "circulation"


class WallSide(str, Enum):
    """Compass side of a room wall."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"


class RiskLevel(str, Enum):
    """Three-tier rating used for heat risk and daylight quality."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AirflowStrength(str, Enum):
    """Strength of a passive airflow path."""

    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


def _lower(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().lower()
    return v


# =============================================================================
# ROOMS
# =============================================================================


class WindowPlacement(BaseModel):
    """A window on one wall of a room."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    side: WallSide
    position: float = Field(..., ge=0.0, le=1.0, description="Relative position along the wall (0-1)")
    width: float = Field(..., gt=0, description="Window width (m)")
    shading: bool = Field(default=False, description="External shading device present")

    @field_validator("side", mode="before")
    @classmethod
    def normalize_side(cls, v):
        return _lower(v)


class Room(BaseModel):
    """An axis-aligned room rectangle in plan coordinates (meters).

    Overlap between rooms is not checked; the design service owns layout.
    Unknown room types are kept verbatim and rendered with the default color.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str = Field(..., description="One of RoomType values")
    x: float
    y: float
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    windows: List[WindowPlacement] = Field(default_factory=list)
    reasoning: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return _lower(v)

    @property
    def room_type(self) -> Optional[RoomType]:
        """Known category, or None for an unrecognized type string."""
        try:
            return RoomType(self.type)
        except ValueError:
            return None


# =============================================================================
# DIAGNOSTICS
# =============================================================================


class HeatRiskZone(BaseModel):
    """Heat risk rating for a room."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    room: str
    level: RiskLevel
    room_id: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        return _lower(v)


class AirflowPath(BaseModel):
    """Directional airflow between two rooms."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    from_room: str = Field(..., alias="from")
    to_room: str = Field(..., alias="to")
    strength: AirflowStrength = AirflowStrength.MODERATE.value
    from_id: Optional[str] = None
    to_id: Optional[str] = None

    @field_validator("strength", mode="before")
    @classmethod
    def normalize_strength(cls, v):
        return _lower(v)


class DaylightZone(BaseModel):
    """Daylight quality rating for a room."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    room: str
    quality: RiskLevel
    room_id: Optional[str] = None

    @field_validator("quality", mode="before")
    @classmethod
    def normalize_quality(cls, v):
        return _lower(v)


class ClimateDiagnostics(BaseModel):
    """Diagnostic overlay data for a floor plan."""

    model_config = ConfigDict(frozen=True)

    heat_risk: List[HeatRiskZone] = Field(default_factory=list)
    airflow: List[AirflowPath] = Field(default_factory=list)
    daylight: List[DaylightZone] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.heat_risk or self.airflow or self.daylight)


# =============================================================================
# FLOOR PLAN
# =============================================================================


class PerformanceMetrics(BaseModel):
    """Normalized passive-performance scores (0-1)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    natural_light_score: float = Field(..., alias="naturalLightScore", ge=0.0, le=1.0)
    ventilation_efficiency: float = Field(..., alias="ventilationEfficiency", ge=0.0, le=1.0)
    thermal_mass_utilization: float = Field(..., alias="thermalMassUtilization", ge=0.0, le=1.0)
    solar_control_rating: float = Field(..., alias="solarControlRating", ge=0.0, le=1.0)

    def as_list(self) -> List[float]:
        """Scores in display order: daylight, ventilation, thermal mass, solar control."""
        return [
            self.natural_light_score,
            self.ventilation_efficiency,
            self.thermal_mass_utilization,
            self.solar_control_rating,
        ]

    def average(self) -> float:
        return sum(self.as_list()) / 4


class RejectedAlternative(BaseModel):
    """A layout option the design service considered and discarded."""

    model_config = ConfigDict(frozen=True)

    option: str
    reason_for_rejection: str


class FloorPlan(BaseModel):
    """A complete floor plan design."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    design_title: str = Field(..., alias="designTitle")
    orientation: float = Field(default=0.0, description="Degrees from north")
    rooms: List[Room] = Field(default_factory=list)
    total_area: float = Field(..., alias="totalArea", ge=0)
    performance_metrics: PerformanceMetrics = Field(..., alias="performanceMetrics")
    architect_reasoning: str = Field(default="", alias="architectReasoning")
    rejected_alternatives: List[RejectedAlternative] = Field(default_factory=list)
    diagnostics: ClimateDiagnostics = Field(default_factory=ClimateDiagnostics)

    def with_diagnostics(self, diagnostics: ClimateDiagnostics) -> "FloorPlan":
        """Return a copy with only the diagnostics replaced.

        The copy is shallow: every other field is the same object.
        """
        return self.model_copy(update={"diagnostics": diagnostics})

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with the service's field names."""
        return self.model_dump(mode="json", by_alias=True)

"""ClimateSense domain models."""

from models.climate import (
    AverageTemperature,
    ClimateData,
    DesignPriority,
    DesignRequest,
)
from models.floor_plan import (
    AirflowPath,
    AirflowStrength,
    ClimateDiagnostics,
    DaylightZone,
    FloorPlan,
    HeatRiskZone,
    PerformanceMetrics,
    RejectedAlternative,
    RiskLevel,
    Room,
    RoomType,
    WallSide,
    WindowPlacement,
)
from models.refinement import (
    ExpectedImprovements,
    OptimizationEvaluation,
    RefinementResult,
)
from models.design_state import DesignState

__all__ = [
    "AverageTemperature",
    "ClimateData",
    "DesignPriority",
    "DesignRequest",
    "AirflowPath",
    "AirflowStrength",
    "ClimateDiagnostics",
    "DaylightZone",
    "FloorPlan",
    "HeatRiskZone",
    "PerformanceMetrics",
    "RejectedAlternative",
    "RiskLevel",
    "Room",
    "RoomType",
    "WallSide",
    "WindowPlacement",
    "ExpectedImprovements",
    "OptimizationEvaluation",
    "RefinementResult",
    "DesignState",
]

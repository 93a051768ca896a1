"""Refinement and optimization verdict models for ClimateSense."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from models.floor_plan import FloorPlan


class ExpectedImprovements(BaseModel):
    """Quantified gains claimed for a refinement."""

    model_config = ConfigDict(frozen=True)

    heat: str = Field(..., description="Thermal efficiency explanation")
    airflow: str = Field(..., description="Passive airflow explanation")
    heat_improvement_pct: float = Field(..., description="Heat gain reduction (%)")
    airflow_improvement_pct: float = Field(..., description="Airflow velocity increase (%)")


class RefinementResult(BaseModel):
    """A revised floor plan plus the changes that produced it."""

    model_config = ConfigDict(frozen=True)

    revised_floor_plan: FloorPlan
    changes_made: List[str] = Field(default_factory=list)
    expected_improvements: ExpectedImprovements


class OptimizationEvaluation(BaseModel):
    """Verdict on whether another design iteration is worthwhile."""

    model_config = ConfigDict(frozen=True)

    iterate: bool = Field(..., description="Further iteration justified")
    recommended_adjustments: List[str] = Field(default_factory=list)
    expected_benefit: str = ""

"""
Summary and report views for ClimateSense.

Read-only view models for the page panels:
- Climate card (zone, temperatures, challenges, strategies, guidance)
- Performance radar, overall score and derived estimates
- Refinement audit log and quantified improvements
- Optimization verdict
- Rejected alternatives and reasoning statements
- Action button states derived from the busy flags
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from models.climate import ClimateData, DesignRequest
from models.design_state import DesignState
from models.floor_plan import FloorPlan, PerformanceMetrics, RejectedAlternative, Room
from models.refinement import OptimizationEvaluation, RefinementResult

RADAR_SUBJECTS = ("Daylight", "Ventilation", "Thermal Mass", "Solar Control")
RADAR_SIZE = 220
RADAR_RINGS = (0.25, 0.5, 0.75, 1.0)
MAX_REASONING_ROOMS = 6


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (display rounding)."""
    return int(math.floor(value + 0.5))


def to_percent(score: float) -> int:
    return round_half_up(score * 100)


# =============================================================================
# Performance
# =============================================================================


@dataclass
class RadarAxis:
    subject: str
    value: int
    label_x: float = 0.0
    label_y: float = 0.0


@dataclass
class PerformanceSummary:
    """Climate performance index panel."""

    axes: List[RadarAxis]
    average_score: int
    cooling_reduction: int
    daylight_improvement: int
    ventilation_coverage: str
    solar_exposure: str
    radar_points: str
    radar_rings: List[str] = field(default_factory=list)
    radar_size: int = RADAR_SIZE


def overall_score(metrics: PerformanceMetrics) -> int:
    """Overall passive efficiency: rounded mean of the four metrics x 100."""
    return to_percent(metrics.average())


def ventilation_coverage(metrics: PerformanceMetrics) -> str:
    if metrics.ventilation_efficiency > 0.7:
        return "High"
    if metrics.ventilation_efficiency > 0.4:
        return "Medium"
    return "Low"


def solar_exposure(metrics: PerformanceMetrics) -> str:
    if metrics.solar_control_rating > 0.7:
        return "Minimized"
    if metrics.solar_control_rating > 0.4:
        return "Controlled"
    return "Needs Improvement"


def _radar_vertex(index: int, fraction: float, size: int = RADAR_SIZE) -> Tuple[float, float]:
    # Axis 0 points up, then clockwise
    center = size / 2
    radius = center * 0.7 * fraction
    angle = -math.pi / 2 + index * 2 * math.pi / len(RADAR_SUBJECTS)
    return center + radius * math.cos(angle), center + radius * math.sin(angle)


def _points(vertices: List[Tuple[float, float]]) -> str:
    return " ".join(f"{x:.2f},{y:.2f}" for x, y in vertices)


def build_performance_summary(metrics: PerformanceMetrics) -> PerformanceSummary:
    values = [to_percent(score) for score in metrics.as_list()]
    axes = []
    for index, (subject, value) in enumerate(zip(RADAR_SUBJECTS, values)):
        label_x, label_y = _radar_vertex(index, 1.25)
        axes.append(RadarAxis(subject=subject, value=value, label_x=label_x, label_y=label_y))

    return PerformanceSummary(
        axes=axes,
        average_score=overall_score(metrics),
        cooling_reduction=round_half_up(
            15 + metrics.solar_control_rating * 20 + metrics.ventilation_efficiency * 15
        ),
        daylight_improvement=round_half_up(30 + metrics.natural_light_score * 30),
        ventilation_coverage=ventilation_coverage(metrics),
        solar_exposure=solar_exposure(metrics),
        radar_points=_points([_radar_vertex(i, v / 100) for i, v in enumerate(values)]),
        radar_rings=[
            _points([_radar_vertex(i, ring) for i in range(len(RADAR_SUBJECTS))])
            for ring in RADAR_RINGS
        ],
    )


# =============================================================================
# Climate
# =============================================================================


@dataclass
class ClimateCard:
    location: str
    climate_zone: str
    temperature_range: str
    solar_potential: str
    prevailing_winds: str
    challenges: List[str]
    strategies: List[str]
    orientation_guidance: str
    window_guidance: str
    zoning_guidance: str
    performance: Optional[PerformanceSummary] = None


def _format_temp(value: float) -> str:
    return f"{value:g}"


def build_climate_card(climate: ClimateData, metrics: Optional[PerformanceMetrics] = None) -> ClimateCard:
    temps = climate.average_temp
    return ClimateCard(
        location=climate.location,
        climate_zone=climate.climate_zone,
        temperature_range=f"{_format_temp(temps.min)}° – {_format_temp(temps.max)}°C",
        solar_potential=climate.solar_potential,
        prevailing_winds=climate.prevailing_winds,
        challenges=list(climate.climate_challenges),
        strategies=list(climate.design_strategies),
        orientation_guidance=climate.orientation_guidance,
        window_guidance=climate.window_guidance,
        zoning_guidance=climate.zoning_guidance,
        performance=build_performance_summary(metrics) if metrics is not None else None,
    )


# =============================================================================
# Refinement and Verdict
# =============================================================================


@dataclass
class RefinementPanel:
    changes: List[str]
    heat_explanation: str
    heat_delta: str
    airflow_explanation: str
    airflow_delta: str


def _delta(pct: float) -> str:
    return f"+{pct:g}%"


def build_refinement_panel(refinement: RefinementResult) -> RefinementPanel:
    improvements = refinement.expected_improvements
    return RefinementPanel(
        changes=list(refinement.changes_made),
        heat_explanation=improvements.heat,
        heat_delta=_delta(improvements.heat_improvement_pct),
        airflow_explanation=improvements.airflow,
        airflow_delta=_delta(improvements.airflow_improvement_pct),
    )


@dataclass
class VerdictPanel:
    iterate: bool
    badge: str
    expected_benefit: str
    adjustments: List[str]


def build_verdict_panel(verdict: OptimizationEvaluation) -> VerdictPanel:
    return VerdictPanel(
        iterate=verdict.iterate,
        badge="POTENTIAL FOR GAINS" if verdict.iterate else "OPTIMIZED TO LIMIT",
        expected_benefit=verdict.expected_benefit,
        adjustments=list(verdict.recommended_adjustments) if verdict.iterate else [],
    )


# =============================================================================
# Reasoning
# =============================================================================


@dataclass
class ReasoningPanel:
    statement: str
    rooms: List[Room]
    rejected_alternatives: List[RejectedAlternative]


def build_reasoning_panel(plan: FloorPlan) -> ReasoningPanel:
    rooms = [room for room in plan.rooms if room.reasoning][:MAX_REASONING_ROOMS]
    return ReasoningPanel(
        statement=plan.architect_reasoning,
        rooms=rooms,
        rejected_alternatives=list(plan.rejected_alternatives),
    )


# =============================================================================
# Page
# =============================================================================


@dataclass
class ActionButton:
    label: str
    enabled: bool
    visible: bool = True
    busy: bool = False


@dataclass
class PageView:
    """Everything the index template renders besides the SVG itself."""

    request: DesignRequest
    state: DesignState
    generate_button: ActionButton
    diagnose_button: ActionButton
    refine_button: ActionButton
    revision_label: str
    climate_card: Optional[ClimateCard] = None
    refinement_panel: Optional[RefinementPanel] = None
    verdict_panel: Optional[VerdictPanel] = None
    reasoning_panel: Optional[ReasoningPanel] = None


def build_action_buttons(state: DesignState, request: DesignRequest) -> Tuple[ActionButton, ActionButton, ActionButton]:
    """(generate, diagnose, refine) button states."""
    busy = state.is_generating or state.is_refining
    generate = ActionButton(
        label="Synthesizing Data..." if state.is_generating else "Start Autonomous Design",
        enabled=request.has_location and not busy,
        busy=busy,
    )
    diagnose = ActionButton(
        label="Auditing..." if state.is_diagnosing else "Diagnostic Audit",
        enabled=state.floor_plan is not None and not (state.is_diagnosing or state.is_refining),
        visible=state.floor_plan is not None,
    )
    refine = ActionButton(
        label="Refining..." if state.is_refining else "Refine & Optimize",
        enabled=state.floor_plan is not None and state.climate is not None and not state.is_refining,
        visible=state.floor_plan is not None and state.refinement is None,
    )
    return generate, diagnose, refine


def build_page_view(state: DesignState, request: DesignRequest) -> PageView:
    generate, diagnose, refine = build_action_buttons(state, request)
    plan = state.floor_plan

    return PageView(
        request=request,
        state=state,
        generate_button=generate,
        diagnose_button=diagnose,
        refine_button=refine,
        revision_label="Optimized V2" if state.refinement else "Initial Draft",
        climate_card=(
            build_climate_card(state.climate, plan.performance_metrics if plan else None)
            if state.climate else None
        ),
        refinement_panel=build_refinement_panel(state.refinement) if state.refinement else None,
        verdict_panel=build_verdict_panel(state.optimization_verdict) if state.optimization_verdict else None,
        reasoning_panel=build_reasoning_panel(plan) if plan else None,
    )

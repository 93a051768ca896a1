"""Design state model and transitions for ClimateSense.

The design state is an immutable snapshot. Every workflow step produces a
new snapshot through one of the transition functions below
(old state + event -> new state); nothing mutates a state in place.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from models.climate import ClimateData
from models.floor_plan import ClimateDiagnostics, FloorPlan
from models.refinement import OptimizationEvaluation, RefinementResult


GENERATION_FAILED_MESSAGE = "Failed to generate design."
REFINEMENT_FAILED_MESSAGE = "Optimization cycle failed. Please try again."
DIAGNOSTICS_FAILED_MESSAGE = "Diagnostic audit failed."

REFINEMENT_HISTORY_ENTRY = "Refined design for performance optimization"


class DesignState(BaseModel):
    """Everything the page needs to render a design session."""

    model_config = ConfigDict(frozen=True)

    is_generating: bool = False
    is_refining: bool = False
    is_evaluating: bool = False
    is_diagnosing: bool = False

    climate: Optional[ClimateData] = None
    floor_plan: Optional[FloorPlan] = None
    previous_floor_plan: Optional[FloorPlan] = None
    refinement: Optional[RefinementResult] = None
    optimization_verdict: Optional[OptimizationEvaluation] = None
    error: Optional[str] = None

    history: Tuple[str, ...] = Field(default_factory=tuple)
    plan_revision: int = Field(default=0, ge=0, description="Bumped on every committed plan")

    def to_api(self) -> dict:
        """Serialize for the JSON API using the service's field names."""
        return self.model_dump(mode="json", by_alias=True)


def _evolve(state: DesignState, **changes) -> DesignState:
    return state.model_copy(update=changes)


# =============================================================================
# GENERATE
# =============================================================================


def generation_started(state: DesignState) -> DesignState:
    return _evolve(
        state,
        is_generating=True,
        error=None,
        refinement=None,
        optimization_verdict=None,
        previous_floor_plan=None,
    )


def generation_succeeded(
    state: DesignState,
    climate: ClimateData,
    floor_plan: FloorPlan,
    location: str,
) -> DesignState:
    """Commit climate and plan together."""
    return _evolve(
        state,
        is_generating=False,
        climate=climate,
        floor_plan=floor_plan,
        plan_revision=state.plan_revision + 1,
        history=state.history + (f"Designed for {location}",),
    )


def generation_failed(state: DesignState, message: Optional[str]) -> DesignState:
    """Record the failure; previously committed climate and plan are kept."""
    return _evolve(
        state,
        is_generating=False,
        error=message or GENERATION_FAILED_MESSAGE,
    )


# =============================================================================
# REFINE (+ automatic evaluation)
# =============================================================================


def refinement_started(state: DesignState) -> DesignState:
    return _evolve(state, is_refining=True)


def refinement_succeeded(
    state: DesignState,
    original_plan: FloorPlan,
    refinement: RefinementResult,
) -> DesignState:
    return _evolve(
        state,
        is_refining=False,
        refinement=refinement,
        previous_floor_plan=original_plan,
        floor_plan=refinement.revised_floor_plan,
        plan_revision=state.plan_revision + 1,
        history=state.history + (REFINEMENT_HISTORY_ENTRY,),
    )


def evaluation_started(state: DesignState) -> DesignState:
    return _evolve(state, is_evaluating=True)


def evaluation_succeeded(state: DesignState, verdict: OptimizationEvaluation) -> DesignState:
    return _evolve(state, is_evaluating=False, optimization_verdict=verdict)


def refinement_failed(state: DesignState) -> DesignState:
    """Either the refine or the evaluate call failed; the cause is not surfaced."""
    return _evolve(
        state,
        is_refining=False,
        is_evaluating=False,
        error=REFINEMENT_FAILED_MESSAGE,
    )


# =============================================================================
# DIAGNOSE
# =============================================================================


def diagnostics_started(state: DesignState) -> DesignState:
    return _evolve(state, is_diagnosing=True)


def diagnostics_succeeded(
    state: DesignState,
    diagnostics: ClimateDiagnostics,
    plan_revision: int,
) -> DesignState:
    """Replace only the diagnostics of the current plan.

    Diagnostics computed for an older revision are dropped.
    """
    if state.floor_plan is None or plan_revision != state.plan_revision:
        return _evolve(state, is_diagnosing=False)
    return _evolve(
        state,
        is_diagnosing=False,
        floor_plan=state.floor_plan.with_diagnostics(diagnostics),
    )


def diagnostics_failed(state: DesignState) -> DesignState:
    return _evolve(state, is_diagnosing=False, error=DIAGNOSTICS_FAILED_MESSAGE)


def is_stale_revision(state: DesignState, plan_revision: int) -> bool:
    """True when a plan was committed after ``plan_revision`` was read."""
    return plan_revision != state.plan_revision

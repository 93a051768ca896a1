"""Design Controller for ClimateSense.

Coordinates the Generate, Refine and Diagnose workflows over a single
design state. Each workflow is a fixed sequence of design service calls;
the state is replaced through the transitions in models.design_state at
every step, so the page can re-render between calls.

Remote failures are caught here and turned into the state's error message.
They never propagate to the caller.
"""

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple
from uuid import uuid4

import structlog

from config.errors import ClimateSenseError
from config.settings import settings
from models.climate import DesignRequest
from models.design_state import (
    DesignState,
    generation_started,
    generation_succeeded,
    generation_failed,
    refinement_started,
    refinement_succeeded,
    evaluation_started,
    evaluation_succeeded,
    refinement_failed,
    diagnostics_started,
    diagnostics_succeeded,
    diagnostics_failed,
    is_stale_revision,
)
from services.design_service import BaseDesignService, DesignService
from utils.workflow_logger import (
    log_workflow_start,
    log_workflow_complete,
    log_workflow_failed,
    log_workflow_skipped,
    log_state_summary,
)

logger = structlog.get_logger()


def _error_message(error: Exception) -> str:
    if isinstance(error, ClimateSenseError):
        return error.message
    return str(error)


class DesignController:
    """Owns one design session's state and runs its workflows.

    Flow per workflow:
    - Generate: fetch climate -> generate design -> commit both
    - Refine: refine -> commit revised plan -> evaluate -> commit verdict
    - Diagnose: run diagnostics -> replace the plan's diagnostics

    A workflow whose precondition is not met is skipped and the state is
    returned unchanged. Different workflows are not serialized against each
    other; diagnostics for a superseded plan are dropped on commit.
    """

    def __init__(
        self,
        design_service: Optional[BaseDesignService] = None,
        session_id: Optional[str] = None,
        state: Optional[DesignState] = None
    ):
        """Initialize DesignController.

        Args:
            design_service: Optional design service instance.
            session_id: Optional session identifier used in logs.
            state: Optional initial state.
        """
        self.design_service = design_service or DesignService()
        self.session_id = session_id or f"ses-{uuid4().hex[:12]}"
        self.request = DesignRequest()

        self._state = state or DesignState()
        self._start_time: Optional[float] = None

    @property
    def state(self) -> DesignState:
        """Current design state snapshot."""
        return self._state

    @property
    def elapsed_ms(self) -> int:
        """Get elapsed time of the current workflow in milliseconds."""
        if self._start_time is None:
            return 0
        return int((time.time() - self._start_time) * 1000)

    @property
    def tokens_used(self) -> int:
        """Tokens consumed by this session's design service."""
        return self.design_service.total_tokens_used

    def _apply(self, transition: Callable[..., DesignState], *args) -> DesignState:
        self._state = transition(self._state, *args)
        return self._state

    def update_request(self, request: DesignRequest) -> None:
        """Remember the latest form input."""
        self.request = request

    # =========================================================================
    # GENERATE
    # =========================================================================

    async def generate(self, request: Optional[DesignRequest] = None) -> DesignState:
        """Fetch the climate profile, then synthesize a floor plan.

        Args:
            request: Form input; defaults to the last remembered request.

        Returns:
            The resulting design state.
        """
        if request is not None:
            self.update_request(request)
        request = self.request

        if not request.has_location:
            log_workflow_skipped("generate", self.session_id, "missing_location")
            return self._state
        if self._state.is_generating:
            log_workflow_skipped("generate", self.session_id, "already_generating")
            return self._state

        self._start_time = time.time()
        log_workflow_start("generate", self.session_id, request.model_dump())
        self._apply(generation_started)

        step = "fetch_climate"
        try:
            climate = await self.design_service.fetch_climate(
                request.location,
                request.plot_dimensions,
                request.priority
            )
            logger.info(
                "climate_fetched",
                session_id=self.session_id,
                location=climate.location,
                climate_zone=climate.climate_zone
            )

            step = "generate_design"
            plan = await self.design_service.generate_design(
                climate,
                request.plot_dimensions,
                request.requirements
            )
        except Exception as e:
            log_workflow_failed("generate", self.session_id, step, str(e))
            self._apply(generation_failed, _error_message(e))
            return self._state

        self._apply(generation_succeeded, climate, plan, request.location)

        logger.info(
            "design_generated",
            session_id=self.session_id,
            design_title=plan.design_title,
            room_count=len(plan.rooms),
            plan_revision=self._state.plan_revision
        )
        log_workflow_complete(
            "generate", self.session_id, self.elapsed_ms, ["climate", "design"], self.tokens_used
        )
        log_state_summary(self.session_id, self._state)
        return self._state

    # =========================================================================
    # REFINE
    # =========================================================================

    async def refine(self) -> DesignState:
        """Refine the current plan, then evaluate the revised metrics."""
        original_plan = self._state.floor_plan
        climate = self._state.climate

        if original_plan is None or climate is None:
            log_workflow_skipped("refine", self.session_id, "no_design")
            return self._state
        if self._state.is_refining:
            log_workflow_skipped("refine", self.session_id, "already_refining")
            return self._state

        self._start_time = time.time()
        log_workflow_start("refine", self.session_id, {"design_title": original_plan.design_title})
        self._apply(refinement_started)

        step = "refine"
        try:
            refinement = await self.design_service.refine(original_plan, climate)
            self._apply(refinement_succeeded, original_plan, refinement)

            logger.info(
                "design_refined",
                session_id=self.session_id,
                changes=len(refinement.changes_made),
                plan_revision=self._state.plan_revision
            )

            step = "evaluate"
            self._apply(evaluation_started)
            verdict = await self.design_service.evaluate(
                refinement.revised_floor_plan.performance_metrics
            )
            self._apply(evaluation_succeeded, verdict)
        except Exception as e:
            log_workflow_failed("refine", self.session_id, step, str(e))
            self._apply(refinement_failed)
            return self._state

        logger.info(
            "optimization_evaluated",
            session_id=self.session_id,
            iterate=verdict.iterate,
            adjustments=len(verdict.recommended_adjustments)
        )
        log_workflow_complete(
            "refine", self.session_id, self.elapsed_ms, ["refine", "evaluate"], self.tokens_used
        )
        log_state_summary(self.session_id, self._state)
        return self._state

    # =========================================================================
    # DIAGNOSE
    # =========================================================================

    async def diagnose(self) -> DesignState:
        """Recompute the diagnostics of the current plan."""
        plan = self._state.floor_plan

        if plan is None:
            log_workflow_skipped("diagnose", self.session_id, "no_design")
            return self._state
        if self._state.is_diagnosing:
            log_workflow_skipped("diagnose", self.session_id, "already_diagnosing")
            return self._state

        self._start_time = time.time()
        revision = self._state.plan_revision
        log_workflow_start("diagnose", self.session_id, {"plan_revision": revision})
        self._apply(diagnostics_started)

        try:
            diagnostics = await self.design_service.run_diagnostics(plan)
        except Exception as e:
            log_workflow_failed("diagnose", self.session_id, "run_diagnostics", str(e))
            self._apply(diagnostics_failed)
            return self._state

        if is_stale_revision(self._state, revision):
            logger.warning(
                "diagnostics_discarded",
                session_id=self.session_id,
                computed_for_revision=revision,
                current_revision=self._state.plan_revision
            )

        self._apply(diagnostics_succeeded, diagnostics, revision)

        logger.info(
            "diagnostics_updated",
            session_id=self.session_id,
            heat_risk=len(diagnostics.heat_risk),
            airflow=len(diagnostics.airflow),
            daylight=len(diagnostics.daylight)
        )
        log_workflow_complete(
            "diagnose", self.session_id, self.elapsed_ms, ["diagnostics"], self.tokens_used
        )
        return self._state


class ControllerRegistry:
    """One DesignController per browser session.

    Bounded two ways: sessions idle for longer than ``session_ttl_seconds``
    are dropped on the next lookup, and once ``max_sessions`` are held the
    least recently used one is evicted.
    """

    def __init__(
        self,
        factory: Optional[Callable[[str], DesignController]] = None,
        max_sessions: Optional[int] = None,
        session_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self._factory = factory or (lambda session_id: DesignController(session_id=session_id))
        self.max_sessions = max_sessions if max_sessions is not None else settings.session_limit
        self.session_ttl_seconds = (
            session_ttl_seconds if session_ttl_seconds is not None else settings.session_ttl_seconds
        )
        self._clock = clock
        self._controllers: "OrderedDict[str, Tuple[DesignController, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> DesignController:
        """Get the controller for a session, creating it on first use."""
        with self._lock:
            now = self._clock()
            self._expire(now)

            entry = self._controllers.get(session_id)
            if entry is not None:
                controller = entry[0]
                self._controllers.move_to_end(session_id)
            else:
                controller = self._factory(session_id)
                logger.info("session_created", session_id=session_id)
                while self._controllers and len(self._controllers) >= self.max_sessions:
                    evicted, _ = self._controllers.popitem(last=False)
                    logger.info("session_evicted", session_id=evicted, reason="limit")
            self._controllers[session_id] = (controller, now)
            return controller

    def _expire(self, now: float) -> None:
        # Entries are ordered by last use, so the idle ones are at the front.
        while self._controllers:
            session_id, (_, last_used) = next(iter(self._controllers.items()))
            if now - last_used <= self.session_ttl_seconds:
                break
            del self._controllers[session_id]
            logger.info("session_evicted", session_id=session_id, reason="idle")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)

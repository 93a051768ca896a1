"""Remote design service for ClimateSense.

Wraps the LLM behind five typed request kinds. Each request:
1. Builds a natural-language instruction from the inputs
2. Declares the target JSON schema (derived from the pydantic model)
3. Issues exactly one LLM call (no retry, no caching)
4. Parses and validates the response into the domain model

Any transport failure or schema mismatch is raised as ClimateSenseError;
callers decide what to show the user.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, TypeVar
import json
import time

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from config.settings import settings
from config.errors import ClimateSenseError, ErrorCode
from models.climate import ClimateData, DesignPriority
from models.floor_plan import ClimateDiagnostics, FloorPlan, PerformanceMetrics
from models.refinement import OptimizationEvaluation, RefinementResult
from services.llm_service import LLMService
from services.prompts import (
    ARCHITECT_SYSTEM_PROMPT,
    CLIMATE_PROMPT,
    DESIGN_PROMPT,
    REFINE_PROMPT,
    DIAGNOSTICS_PROMPT,
    EVALUATE_PROMPT,
)

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseDesignService(ABC):
    """Abstract design capability used by the design controller.

    Tests substitute a deterministic implementation.
    """

    @abstractmethod
    async def fetch_climate(self, location: str, plot_dimensions: str, priority: str) -> ClimateData:
        """Climate profile and passive strategies for a location."""

    @abstractmethod
    async def generate_design(self, climate: ClimateData, plot_dimensions: str, requirements: str) -> FloorPlan:
        """Floor plan for the climate, plot and brief."""

    @abstractmethod
    async def refine(self, current_plan: FloorPlan, climate: ClimateData) -> RefinementResult:
        """Revised floor plan with changes and expected improvements."""

    @abstractmethod
    async def run_diagnostics(self, floor_plan: FloorPlan) -> ClimateDiagnostics:
        """Heat risk, airflow and daylight diagnostics for a plan."""

    @abstractmethod
    async def evaluate(self, metrics: PerformanceMetrics) -> OptimizationEvaluation:
        """Verdict on whether another iteration is worthwhile."""

    @property
    def total_tokens_used(self) -> int:
        """Tokens consumed so far (0 for services that do not track usage)."""
        return 0


def response_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON schema for a response model, using wire field names."""
    return model.model_json_schema(by_alias=True)


class DesignService(BaseDesignService):
    """LLM-backed design service.

    Climate, diagnostics and evaluation requests use the default model;
    layout synthesis and refinement use the design model.
    """

    def __init__(
        self,
        llm_service: Optional[LLMService] = None,
        design_llm_service: Optional[LLMService] = None,
    ):
        """Initialize DesignService.

        Args:
            llm_service: LLM service for lightweight requests.
            design_llm_service: LLM service for layout requests
                (defaults to a service on settings.design_model).
        """
        self.llm = llm_service or LLMService()
        self.design_llm = design_llm_service or (
            LLMService(model=settings.design_model) if llm_service is None else llm_service
        )

    @property
    def total_tokens_used(self) -> int:
        """Tokens consumed across the distinct LLM services."""
        if self.design_llm is self.llm:
            return self.llm.total_tokens_used
        return self.llm.total_tokens_used + self.design_llm.total_tokens_used

    async def _request(
        self,
        request_kind: str,
        llm: LLMService,
        user_message: str,
        model: Type[ModelT],
    ) -> ModelT:
        """Issue one structured request and validate the response."""
        start = time.time()
        logger.info("design_request_started", request_kind=request_kind, model=llm.model)

        result = await llm.generate_json(
            system_prompt=ARCHITECT_SYSTEM_PROMPT,
            user_message=user_message,
            schema=response_schema(model),
            schema_name=request_kind,
            max_tokens=settings.llm_max_tokens,
        )

        try:
            parsed = model.model_validate(result["content"])
        except PydanticValidationError as e:
            logger.warning(
                "design_response_invalid",
                request_kind=request_kind,
                error_count=e.error_count(),
            )
            raise ClimateSenseError(
                code=ErrorCode.INVALID_SCHEMA,
                message=f"Design service returned an invalid {request_kind} response",
                details={
                    "request_kind": request_kind,
                    "errors": [
                        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                        for err in e.errors()
                    ],
                },
            ) from e

        logger.info(
            "design_request_completed",
            request_kind=request_kind,
            duration_ms=int((time.time() - start) * 1000),
            tokens_used=result.get("tokens_used", 0),
        )
        return parsed

    async def fetch_climate(self, location: str, plot_dimensions: str, priority: str) -> ClimateData:
        priority_value = priority.value if isinstance(priority, DesignPriority) else priority
        message = CLIMATE_PROMPT.format(
            location=location,
            plot_dimensions=plot_dimensions,
            priority=priority_value,
        )
        return await self._request("climate", self.llm, message, ClimateData)

    async def generate_design(self, climate: ClimateData, plot_dimensions: str, requirements: str) -> FloorPlan:
        message = DESIGN_PROMPT.format(
            plot_dimensions=plot_dimensions,
            requirements=requirements,
            climate_zone=climate.climate_zone,
            strategies=", ".join(climate.design_strategies),
            orientation_guidance=climate.orientation_guidance,
            window_guidance=climate.window_guidance,
            zoning_guidance=climate.zoning_guidance,
        )
        return await self._request("floor_plan", self.design_llm, message, FloorPlan)

    async def refine(self, current_plan: FloorPlan, climate: ClimateData) -> RefinementResult:
        # The whole plan is embedded verbatim; there is no size guard.
        message = REFINE_PROMPT.format(
            climate_zone=climate.climate_zone,
            strategies=", ".join(climate.design_strategies),
            floor_plan_json=json.dumps(current_plan.to_wire()),
        )
        return await self._request("refinement", self.design_llm, message, RefinementResult)

    async def run_diagnostics(self, floor_plan: FloorPlan) -> ClimateDiagnostics:
        message = DIAGNOSTICS_PROMPT.format(floor_plan_json=json.dumps(floor_plan.to_wire()))
        return await self._request("diagnostics", self.llm, message, ClimateDiagnostics)

    async def evaluate(self, metrics: PerformanceMetrics) -> OptimizationEvaluation:
        message = EVALUATE_PROMPT.format(
            metrics_json=json.dumps(metrics.model_dump(by_alias=True))
        )
        return await self._request("evaluation", self.llm, message, OptimizationEvaluation)

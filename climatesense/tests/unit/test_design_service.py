"""Unit tests for the LLM-backed design service."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from config.errors import ClimateSenseError, ErrorCode
from models.climate import ClimateData
from models.floor_plan import ClimateDiagnostics, FloorPlan
from models.refinement import OptimizationEvaluation, RefinementResult
from services.design_service import DesignService, response_schema
from services.prompts import ARCHITECT_SYSTEM_PROMPT
from tests.fixtures.mock_design_data import (
    PHOENIX_CLIMATE,
    PHOENIX_DIAGNOSTICS,
    PHOENIX_FLOOR_PLAN,
    PHOENIX_REFINEMENT,
    PHOENIX_VERDICT,
)


def _llm(content, model="gpt-4o"):
    llm = MagicMock()
    llm.model = model
    llm.generate_json = AsyncMock(return_value={"content": content, "tokens_used": 42})
    return llm


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def climate_llm():
    return _llm(PHOENIX_CLIMATE)


@pytest.fixture
def design_llm():
    return _llm(PHOENIX_FLOOR_PLAN, model="gpt-4o-design")


class TestConstruction:

    def test_single_llm_is_shared(self, climate_llm):
        service = DesignService(llm_service=climate_llm)

        assert service.llm is climate_llm
        assert service.design_llm is climate_llm

    def test_separate_design_llm(self, climate_llm, design_llm):
        service = DesignService(llm_service=climate_llm, design_llm_service=design_llm)

        assert service.llm is climate_llm
        assert service.design_llm is design_llm

    def test_tokens_summed_over_distinct_llms(self, climate_llm, design_llm):
        climate_llm.total_tokens_used = 100
        design_llm.total_tokens_used = 250

        assert DesignService(llm_service=climate_llm).total_tokens_used == 100
        assert DesignService(llm_service=climate_llm, design_llm_service=design_llm).total_tokens_used == 350


class TestRequests:

    @pytest.mark.asyncio
    async def test_fetch_climate(self, climate_llm):
        service = DesignService(llm_service=climate_llm)

        climate = await service.fetch_climate("Phoenix, AZ", "15m x 20m", "cooling")

        assert isinstance(climate, ClimateData)
        assert climate.climate_zone == "Hot Desert (BWh)"

        kwargs = climate_llm.generate_json.call_args.kwargs
        assert kwargs["system_prompt"] == ARCHITECT_SYSTEM_PROMPT
        assert "Phoenix, AZ" in kwargs["user_message"]
        assert "15m x 20m" in kwargs["user_message"]
        assert "cooling" in kwargs["user_message"]
        assert kwargs["schema"] == response_schema(ClimateData)
        assert kwargs["schema_name"] == "climate"

    @pytest.mark.asyncio
    async def test_generate_design_uses_design_llm(self, climate_llm, design_llm, sample_climate):
        service = DesignService(llm_service=climate_llm, design_llm_service=design_llm)

        plan = await service.generate_design(sample_climate, "15m x 20m", "3 bedrooms")

        assert isinstance(plan, FloorPlan)
        assert plan.design_title == "Desert Courtyard House"
        climate_llm.generate_json.assert_not_called()

        message = design_llm.generate_json.call_args.kwargs["user_message"]
        assert "3 bedrooms" in message
        assert "Hot Desert (BWh)" in message
        assert "Thermal mass" in message
        assert sample_climate.zoning_guidance in message

    @pytest.mark.asyncio
    async def test_refine_embeds_current_plan(self, sample_climate, sample_floor_plan):
        llm = _llm(PHOENIX_REFINEMENT)
        service = DesignService(llm_service=llm)

        result = await service.refine(sample_floor_plan, sample_climate)

        assert isinstance(result, RefinementResult)
        assert result.expected_improvements.heat_improvement_pct == 18

        message = llm.generate_json.call_args.kwargs["user_message"]
        assert json.dumps(sample_floor_plan.to_wire()) in message

    @pytest.mark.asyncio
    async def test_run_diagnostics(self, sample_floor_plan):
        llm = _llm(PHOENIX_DIAGNOSTICS)
        service = DesignService(llm_service=llm)

        diagnostics = await service.run_diagnostics(sample_floor_plan)

        assert isinstance(diagnostics, ClimateDiagnostics)
        assert diagnostics.heat_risk[1].level == "medium"
        assert diagnostics.airflow[1].strength == "moderate"
        assert llm.generate_json.call_args.kwargs["schema_name"] == "diagnostics"

    @pytest.mark.asyncio
    async def test_evaluate(self, sample_floor_plan):
        llm = _llm(PHOENIX_VERDICT)
        service = DesignService(llm_service=llm)

        verdict = await service.evaluate(sample_floor_plan.performance_metrics)

        assert isinstance(verdict, OptimizationEvaluation)
        assert verdict.iterate is True
        message = llm.generate_json.call_args.kwargs["user_message"]
        assert "naturalLightScore" in message


class TestFailures:

    @pytest.mark.asyncio
    async def test_schema_mismatch_raises(self):
        llm = _llm({"climateZone": "Tropical"})
        service = DesignService(llm_service=llm)

        with pytest.raises(ClimateSenseError) as exc_info:
            await service.fetch_climate("Lagos", "10m x 10m", "ventilation")

        assert exc_info.value.code == ErrorCode.INVALID_SCHEMA
        assert exc_info.value.details["request_kind"] == "climate"
        assert exc_info.value.details["errors"]

    @pytest.mark.asyncio
    async def test_llm_error_propagates(self):
        llm = MagicMock()
        llm.model = "gpt-4o"
        llm.generate_json = AsyncMock(side_effect=ClimateSenseError(
            code=ErrorCode.LLM_RATE_LIMIT,
            message="LLM rate limit exceeded"
        ))
        service = DesignService(llm_service=llm)

        with pytest.raises(ClimateSenseError) as exc_info:
            await service.evaluate(MagicMock(model_dump=MagicMock(return_value={})))

        assert exc_info.value.code == ErrorCode.LLM_RATE_LIMIT

    @pytest.mark.asyncio
    async def test_one_call_per_request(self, climate_llm):
        service = DesignService(llm_service=climate_llm)

        await service.fetch_climate("Phoenix, AZ", "15m x 20m", "daylight")

        assert climate_llm.generate_json.await_count == 1


def test_response_schema_uses_wire_names():
    schema = response_schema(FloorPlan)

    assert "designTitle" in schema["properties"]
    assert "performanceMetrics" in schema["properties"]

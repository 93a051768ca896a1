"""Pytest configuration and shared fixtures for ClimateSense tests."""

import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock, patch


# ============================================================================
# Ensure local imports work (config/, models/, services/, controllers/, ...)
# ============================================================================
#
# The codebase uses absolute imports like `from models...` / `from services...`.
# This guarantees that `climatesense/` is importable as the top-level module root.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


# ============================================================================
# Settings
# ============================================================================

@pytest.fixture(autouse=True)
def mock_settings(monkeypatch):
    """Mock settings for all tests."""
    from config.secrets import clear_secret_cache

    monkeypatch.setenv("OPENAI_API_KEY", "test-api-key")
    clear_secret_cache()
    with patch('config.settings.settings') as mock:
        mock.openai_api_key = "test-api-key"
        mock.llm_model = "gpt-4o"
        mock.llm_design_model = None
        mock.design_model = "gpt-4o"
        mock.llm_temperature = 0.2
        mock.llm_max_tokens = None
        mock.llm_base_url = None
        mock.secret_key = "test-secret"
        mock.cors_origins = ["http://localhost:5173"]
        mock.session_limit = 500
        mock.session_ttl_seconds = 3600.0
        mock.log_level = "INFO"
        yield mock
    clear_secret_cache()


# ============================================================================
# LLM Mocks
# ============================================================================

@pytest.fixture
def mock_chat_openai():
    """Mock ChatOpenAI client."""
    mock = AsyncMock()
    mock.ainvoke.return_value = MagicMock(
        content="Mock response content",
        response_metadata={"token_usage": {"total_tokens": 100}}
    )
    return mock


@pytest.fixture
def mock_llm_service(mock_chat_openai):
    """Mock LLMService."""
    from services.llm_service import LLMService

    with patch('services.llm_service.ChatOpenAI', return_value=mock_chat_openai):
        service = LLMService(model="gpt-4o", api_key="test-api-key")
        service._client = mock_chat_openai
        return service


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_climate_data():
    """Sample ClimateData payload (wire names)."""
    from tests.fixtures.mock_design_data import PHOENIX_CLIMATE
    return dict(PHOENIX_CLIMATE)


@pytest.fixture
def sample_floor_plan_data():
    """Sample FloorPlan payload (wire names)."""
    from tests.fixtures.mock_design_data import PHOENIX_FLOOR_PLAN
    return dict(PHOENIX_FLOOR_PLAN)


@pytest.fixture
def sample_climate(sample_climate_data):
    from models.climate import ClimateData
    return ClimateData.model_validate(sample_climate_data)


@pytest.fixture
def sample_floor_plan(sample_floor_plan_data):
    from models.floor_plan import FloorPlan
    return FloorPlan.model_validate(sample_floor_plan_data)


@pytest.fixture
def sample_refinement():
    from models.refinement import RefinementResult
    from tests.fixtures.mock_design_data import PHOENIX_REFINEMENT
    return RefinementResult.model_validate(PHOENIX_REFINEMENT)


@pytest.fixture
def sample_verdict():
    from models.refinement import OptimizationEvaluation
    from tests.fixtures.mock_design_data import PHOENIX_VERDICT
    return OptimizationEvaluation.model_validate(PHOENIX_VERDICT)


@pytest.fixture
def sample_diagnostics():
    from models.floor_plan import ClimateDiagnostics
    from tests.fixtures.mock_design_data import PHOENIX_DIAGNOSTICS
    return ClimateDiagnostics.model_validate(PHOENIX_DIAGNOSTICS)


@pytest.fixture
def sample_design_request():
    from models.climate import DesignRequest
    return DesignRequest(location="Phoenix, AZ", priority="cooling")


@pytest.fixture
def mock_design_service(sample_climate, sample_floor_plan, sample_refinement, sample_verdict, sample_diagnostics):
    """Deterministic design service with AsyncMock operations."""
    from services.design_service import BaseDesignService

    service = MagicMock(spec=BaseDesignService)
    service.fetch_climate = AsyncMock(return_value=sample_climate)
    service.generate_design = AsyncMock(return_value=sample_floor_plan)
    service.refine = AsyncMock(return_value=sample_refinement)
    service.run_diagnostics = AsyncMock(return_value=sample_diagnostics)
    service.evaluate = AsyncMock(return_value=sample_verdict)
    service.total_tokens_used = 0
    return service

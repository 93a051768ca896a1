"""Unit tests for the Flask entry points."""

import pytest

from controllers.design_controller import ControllerRegistry, DesignController
from main import create_app, overlay_options, parse_design_request, toggle_links
from config.errors import ValidationError
from models.climate import DesignRequest
from models.design_state import generation_started, refinement_started
from utils.event_loop import BackgroundLoop


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def registry(mock_design_service):
    return ControllerRegistry(
        factory=lambda session_id: DesignController(design_service=mock_design_service, session_id=session_id)
    )


@pytest.fixture
def runner():
    loop = BackgroundLoop()
    yield loop
    loop.close()


@pytest.fixture
def app(registry, runner):
    app = create_app(registry=registry, runner=runner)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


# ============================================================================
# Helpers
# ============================================================================

class TestHelpers:

    def test_parse_design_request_keeps_missing_fields(self):
        current = DesignRequest(location="Oslo", priority="ventilation")

        request = parse_design_request({"location": "Cairo"}, current)

        assert request.location == "Cairo"
        assert request.priority == "ventilation"

    def test_parse_design_request_accepts_wire_name(self):
        request = parse_design_request({"location": "Cairo", "plotDimensions": "9m x 9m"})
        assert request.plot_dimensions == "9m x 9m"

    def test_parse_design_request_invalid_priority(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_design_request({"location": "Cairo", "priority": "views"})

        assert exc_info.value.details["field"] == "priority"

    def test_overlay_options(self):
        options = overlay_options({"heat": "1", "air": "0"})

        assert options.heat is True
        assert options.airflow is False
        assert options.daylight is False

    def test_toggle_links(self):
        links = toggle_links({"heat": "1"})

        assert links["heat"] == {}
        assert links["air"] == {"heat": "1", "air": "1"}
        assert links["light"] == {"heat": "1", "light": "1"}


# ============================================================================
# JSON API
# ============================================================================

class TestApi:

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"

    def test_initial_state(self, client):
        data = client.get("/api/state").get_json()

        assert data["success"] is True
        assert data["data"]["state"]["floor_plan"] is None
        assert data["data"]["request"]["plotDimensions"] == "15m x 20m"

    def test_generate_requires_location(self, client, mock_design_service):
        response = client.post("/api/generate", json={"location": "   "})

        assert response.status_code == 400
        body = response.get_json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        mock_design_service.fetch_climate.assert_not_called()

    def test_generate_rejects_non_object(self, client):
        response = client.post("/api/generate", json=["Phoenix"])
        assert response.status_code == 400

    def test_generate_refine_diagnose(self, client, mock_design_service):
        response = client.post("/api/generate", json={"location": "Phoenix, AZ", "priority": "cooling"})
        state = response.get_json()["data"]
        assert state["floor_plan"]["designTitle"] == "Desert Courtyard House"
        assert state["plan_revision"] == 1

        state = client.post("/api/refine").get_json()["data"]
        assert state["refinement"] is not None
        assert state["optimization_verdict"]["iterate"] is True
        assert state["plan_revision"] == 2

        state = client.post("/api/diagnose").get_json()["data"]
        assert state["floor_plan"]["diagnostics"]["heat_risk"][0]["level"] == "high"

        mock_design_service.fetch_climate.assert_awaited_once_with("Phoenix, AZ", "15m x 20m", "cooling")

    def test_failure_is_reported_in_state(self, client, mock_design_service):
        mock_design_service.fetch_climate.side_effect = RuntimeError("upstream down")

        response = client.post("/api/generate", json={"location": "Phoenix, AZ"})

        assert response.status_code == 200
        assert response.get_json()["data"]["error"] == "upstream down"

    def test_sessions_are_isolated(self, app, registry):
        first, second = app.test_client(), app.test_client()

        first.post("/api/generate", json={"location": "Phoenix, AZ"})

        assert second.get("/api/state").get_json()["data"]["state"]["floor_plan"] is None
        assert len(registry) == 2

    def test_injected_empty_registry_is_used(self, app, registry, runner):
        assert len(registry) == 0
        assert app.extensions["climatesense_registry"] is registry
        assert app.extensions["climatesense_runner"] is runner

        app.test_client().get("/api/state")

        assert len(registry) == 1

    def test_busy_workflow_is_rejected(self, client, registry, mock_design_service):
        client.get("/api/state")
        with client.session_transaction() as sess:
            session_id = sess["session_id"]
        registry.get(session_id)._apply(generation_started)

        response = client.post("/api/generate", json={"location": "Oslo"})

        assert response.status_code == 409
        error = response.get_json()["error"]
        assert error["code"] == "WORKFLOW_BUSY"
        assert error["details"] == {"running": ["is_generating"], "workflow": "generate"}
        mock_design_service.fetch_climate.assert_not_called()

    def test_diagnose_rejected_while_refining(self, client, registry, mock_design_service):
        client.post("/api/generate", json={"location": "Phoenix, AZ"})
        with client.session_transaction() as sess:
            session_id = sess["session_id"]
        registry.get(session_id)._apply(refinement_started)

        response = client.post("/api/diagnose")

        assert response.status_code == 409
        assert response.get_json()["error"]["details"]["workflow"] == "diagnose"
        mock_design_service.run_diagnostics.assert_not_called()

    def test_state_reports_tokens_used(self, client, mock_design_service):
        mock_design_service.total_tokens_used = 1234

        data = client.get("/api/state").get_json()["data"]

        assert data["tokens_used"] == 1234


# ============================================================================
# Page
# ============================================================================

class TestPage:

    def test_index_empty(self, client):
        response = client.get("/")

        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert "Start Autonomous Design" in html
        assert "Blueprint workspace ready" in html

    def test_generate_button_follows_location_and_busy_state(self, client, registry):
        html = client.get("/").get_data(as_text=True)
        assert 'type="submit" disabled>Start Autonomous Design' in html
        assert "disabled = false ||" in html

        client.post("/generate", data={"location": "Phoenix, AZ"})
        html = client.get("/").get_data(as_text=True)
        assert 'disabled>Start Autonomous Design' not in html

        with client.session_transaction() as sess:
            session_id = sess["session_id"]
        registry.get(session_id)._apply(refinement_started)
        html = client.get("/").get_data(as_text=True)
        assert 'type="submit" disabled>Start Autonomous Design' in html
        assert "disabled = true ||" in html

    def test_form_generate_redirects(self, client):
        response = client.post("/generate?heat=1", data={"location": "Phoenix, AZ", "priority": "cooling"})

        assert response.status_code == 302
        assert "heat=1" in response.headers["Location"]

        html = client.get("/?heat=1").get_data(as_text=True)
        assert "Desert Courtyard House" in html
        assert "Hot Desert (BWh)" in html
        assert "<svg" in html
        assert "Diagnostic Audit" in html
        assert "Refine &amp; Optimize" in html

    def test_form_invalid_priority(self, client):
        response = client.post("/generate", data={"location": "Phoenix", "priority": "views"})

        assert response.status_code == 400
        assert "ERROR:" in response.get_data(as_text=True)

    def test_refine_page(self, client):
        client.post("/generate", data={"location": "Phoenix, AZ"})
        client.post("/refine")

        html = client.get("/").get_data(as_text=True)
        assert "Optimized V2" in html
        assert "POTENTIAL FOR GAINS" in html
        assert "Refinement Audit Log" in html

    def test_error_banner(self, client, mock_design_service):
        mock_design_service.fetch_climate.side_effect = RuntimeError("quota exceeded")
        client.post("/generate", data={"location": "Phoenix, AZ"})

        html = client.get("/").get_data(as_text=True)
        assert "ERROR: quota exceeded" in html

    def test_plan_svg(self, client):
        assert client.get("/plan.svg").status_code == 404

        client.post("/generate", data={"location": "Phoenix, AZ"})
        response = client.get("/plan.svg?heat=1&air=1&light=1")

        assert response.status_code == 200
        assert response.mimetype == "image/svg+xml"
        assert b'class="room"' in response.data

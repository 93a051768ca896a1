"""Web entry points for ClimateSense.

Provides:
- The design studio page (form, action buttons, floor plan, panels)
- Form actions for the Generate, Refine and Diagnose workflows
- A standalone SVG endpoint for the current floor plan
- A JSON API exposing the same workflows

Usage:
    cd climatesense
    python main.py
"""

from typing import Dict, Any, Optional
from uuid import uuid4

import structlog
from flask import Flask, Response, jsonify, redirect, render_template, request, session, url_for
from flask_cors import CORS
from markupsafe import Markup
from pydantic import ValidationError as PydanticValidationError

from config.settings import settings
from config.errors import ClimateSenseError, ErrorCode, ValidationError, WorkflowError
from controllers.design_controller import ControllerRegistry, DesignController
from models.climate import DesignPriority, DesignRequest
from models.design_state import DesignState
from rendering.floor_plan_renderer import TEMPLATE_DIR, OverlayOptions, render_floor_plan_svg
from rendering.summary_views import build_page_view
from utils.event_loop import BackgroundLoop
from utils.workflow_logger import configure_logging

logger = structlog.get_logger()

OVERLAY_PARAMS = ("heat", "air", "light")


# ============================================================================
# Helper Functions
# ============================================================================


def success_response(data: Dict[str, Any]) -> Dict[str, Any]:
    """Build success response."""
    return {"success": True, "data": data}


def error_response(code: str, message: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    """Build error response."""
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {}
        }
    }


ERROR_STATUS = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.PRECONDITION_FAILED: 404,
    ErrorCode.WORKFLOW_BUSY: 409,
}

# State flags that block each workflow, mirroring the page's action buttons.
BUSY_FLAGS = {
    "generate": ("is_generating", "is_refining"),
    "refine": ("is_refining",),
    "diagnose": ("is_diagnosing", "is_refining"),
}


def ensure_idle(workflow: str, state: DesignState) -> None:
    """Reject a workflow while a conflicting one is running.

    Raises:
        WorkflowError: WORKFLOW_BUSY if a blocking flag is set.
    """
    running = [flag for flag in BUSY_FLAGS[workflow] if getattr(state, flag)]
    if running:
        raise WorkflowError(
            code=ErrorCode.WORKFLOW_BUSY,
            message=f"Cannot {workflow} while another workflow is running",
            workflow=workflow,
            details={"running": running}
        )


def get_request_json() -> Dict[str, Any]:
    """Extract JSON from request body.

    Returns:
        Parsed JSON data.

    Raises:
        ValidationError: If JSON is invalid.
    """
    try:
        data = request.get_json(force=True, silent=False)
    except Exception as e:
        raise ValidationError(
            message=f"Invalid JSON in request body: {str(e)}"
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return data


def parse_design_request(data: Dict[str, Any], current: Optional[DesignRequest] = None) -> DesignRequest:
    """Build a DesignRequest from form or JSON fields.

    Missing fields keep the current values.

    Raises:
        ValidationError: If a field is invalid (e.g. unknown priority).
    """
    base = (current or DesignRequest()).model_dump()
    fields = {
        "location": data.get("location", base["location"]),
        "plot_dimensions": data.get("plot_dimensions", data.get("plotDimensions", base["plot_dimensions"])),
        "priority": data.get("priority", base["priority"]),
        "requirements": data.get("requirements", base["requirements"]),
    }
    try:
        return DesignRequest(**fields)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        raise ValidationError(message=f"Invalid {field or 'input'}: {first['msg']}", field=field) from e


def overlay_options(args) -> OverlayOptions:
    """Overlay toggles from query parameters (heat, air, light)."""
    return OverlayOptions(
        heat=args.get("heat") == "1",
        airflow=args.get("air") == "1",
        daylight=args.get("light") == "1",
    )


def _overlay_args(args) -> Dict[str, str]:
    return {name: "1" for name in OVERLAY_PARAMS if args.get(name) == "1"}


def toggle_links(args) -> Dict[str, Dict[str, str]]:
    """Query args for each overlay toggle: the current set with that toggle flipped."""
    current = _overlay_args(args)
    links = {}
    for name in OVERLAY_PARAMS:
        flipped = dict(current)
        if name in flipped:
            del flipped[name]
        else:
            flipped[name] = "1"
        links[name] = flipped
    return links


# ============================================================================
# Application
# ============================================================================


def create_app(
    registry: Optional[ControllerRegistry] = None,
    runner: Optional[BackgroundLoop] = None
) -> Flask:
    """Create the Flask application.

    Workflow coroutines from every request run on one background event loop.

    Args:
        registry: Optional controller registry (tests inject stub services).
        runner: Optional background loop shared by all workflows.
    """
    configure_logging(settings.log_level)

    app = Flask(__name__, template_folder=str(TEMPLATE_DIR))
    app.secret_key = settings.secret_key
    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    controllers = registry if registry is not None else ControllerRegistry()
    runner = runner if runner is not None else BackgroundLoop()
    app.extensions["climatesense_registry"] = controllers
    app.extensions["climatesense_runner"] = runner

    def current_controller() -> DesignController:
        session_id = session.get("session_id")
        if not session_id:
            session_id = f"ses-{uuid4().hex[:12]}"
            session["session_id"] = session_id
        return controllers.get(session_id)

    def render_index(controller: DesignController, form_error: Optional[str] = None, status: int = 200):
        state = controller.state
        overlays = overlay_options(request.args)
        plan_svg = None
        if state.floor_plan is not None:
            plan_svg = Markup(render_floor_plan_svg(state.floor_plan, overlays))
        page = build_page_view(state, controller.request)
        return render_template(
            "index.html",
            page=page,
            plan_svg=plan_svg,
            overlays=overlays,
            overlay_args=_overlay_args(request.args),
            toggles=toggle_links(request.args),
            priorities=[priority.value for priority in DesignPriority],
            form_error=form_error,
        ), status

    # ------------------------------------------------------------------------
    # Page and form actions
    # ------------------------------------------------------------------------

    @app.get("/")
    def index():
        return render_index(current_controller())

    @app.post("/generate")
    def generate_form():
        controller = current_controller()
        try:
            design_request = parse_design_request(request.form, controller.request)
        except ValidationError as e:
            return render_index(controller, form_error=e.message, status=400)

        runner.run(controller.generate(design_request))
        return redirect(url_for("index", **_overlay_args(request.args)))

    @app.post("/refine")
    def refine_form():
        controller = current_controller()
        runner.run(controller.refine())
        return redirect(url_for("index", **_overlay_args(request.args)))

    @app.post("/diagnose")
    def diagnose_form():
        controller = current_controller()
        runner.run(controller.diagnose())
        return redirect(url_for("index", **_overlay_args(request.args)))

    @app.get("/plan.svg")
    def plan_svg():
        state = current_controller().state
        if state.floor_plan is None:
            return jsonify(error_response(ErrorCode.PRECONDITION_FAILED, "No floor plan generated yet")), 404
        svg = render_floor_plan_svg(state.floor_plan, overlay_options(request.args))
        return Response(svg, mimetype="image/svg+xml")

    # ------------------------------------------------------------------------
    # JSON API
    # ------------------------------------------------------------------------

    @app.get("/api/health")
    def health_check():
        """Health check endpoint."""
        return jsonify({"status": "ok", "version": "1.0.0"})

    @app.get("/api/state")
    def api_state():
        controller = current_controller()
        return jsonify(success_response({
            "state": controller.state.to_api(),
            "request": controller.request.model_dump(by_alias=True),
            "tokens_used": controller.tokens_used,
        }))

    @app.post("/api/generate")
    def api_generate():
        controller = current_controller()
        try:
            design_request = parse_design_request(get_request_json(), controller.request)
            if not design_request.has_location:
                raise ValidationError(message="Missing location in request", field="location")
        except ValidationError as e:
            return jsonify(error_response(e.code, e.message, e.details)), 400

        ensure_idle("generate", controller.state)
        logger.info("api_generate_received", session_id=controller.session_id, location=design_request.location)
        state = runner.run(controller.generate(design_request))
        return jsonify(success_response(state.to_api()))

    @app.post("/api/refine")
    def api_refine():
        controller = current_controller()
        ensure_idle("refine", controller.state)
        state = runner.run(controller.refine())
        return jsonify(success_response(state.to_api()))

    @app.post("/api/diagnose")
    def api_diagnose():
        controller = current_controller()
        ensure_idle("diagnose", controller.state)
        state = runner.run(controller.diagnose())
        return jsonify(success_response(state.to_api()))

    @app.errorhandler(ClimateSenseError)
    def handle_climatesense_error(e: ClimateSenseError):
        status = ERROR_STATUS.get(e.code, 500)
        if status >= 500:
            logger.error("request_failed", code=e.code, error=e.message)
        else:
            logger.warning("request_rejected", code=e.code, error=e.message)
        return jsonify(error_response(e.code, e.message, e.details)), status

    return app


if __name__ == "__main__":
    create_app().run(host=settings.host, port=settings.port, debug=False)

"""ClimateSense rendering: SVG floor plans and summary panels."""

from rendering.floor_plan_renderer import (
    OverlayOptions,
    build_floor_plan_scene,
    render_floor_plan_svg,
    resolve_room_reference,
    get_jinja_env,
)
from rendering.summary_views import build_page_view

__all__ = [
    "OverlayOptions",
    "build_floor_plan_scene",
    "render_floor_plan_svg",
    "resolve_room_reference",
    "get_jinja_env",
    "build_page_view",
]

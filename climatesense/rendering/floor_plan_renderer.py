"""
Floor Plan Renderer for ClimateSense.

Turns a FloorPlan (meters) into an SVG diagram:
- Rooms projected with a fixed linear scale plus padding, colored by type
- Heat risk and daylight overlays tinting matched rooms
- Airflow arrows between matched room centroids
- Window marks on room walls and a north arrow

Diagnostics reference rooms by free-text label. Resolution order:
1. Room id, when the diagnostic carries one
2. Exact name match (trimmed, case-insensitive), first room in list order
3. Substring match in either direction, first room in list order
Anything else resolves to nothing and its overlay is omitted.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from models.floor_plan import (
    AirflowStrength,
    FloorPlan,
    RiskLevel,
    Room,
    RoomType,
    WallSide,
)

logger = structlog.get_logger(__name__)

# Template directory
TEMPLATE_DIR = Path(__file__).parent / "templates"

SCALE = 35  # px per meter
PADDING = 60  # px around the drawing

DEFAULT_COLORS = ("#f1f5f9", "#94a3b8")
ROOM_COLORS: Dict[RoomType, Tuple[str, str]] = {
    RoomType.LIVING: ("#fff7ed", "#fdba74"),
    RoomType.BEDROOM: ("#eef2ff", "#a5b4fc"),
    RoomType.KITCHEN: ("#fffbeb", "#fcd34d"),
    RoomType.BATHROOM: ("#eff6ff", "#93c5fd"),
    RoomType.BUFFER: ("#ecfdf5", "#6ee7b7"),
}

HEAT_COLOR = "#f43f5e"
HEAT_OPACITY = {
    RiskLevel.HIGH.value: 0.45,
    RiskLevel.MEDIUM.value: 0.25,
    RiskLevel.LOW.value: 0.1,
}

DAYLIGHT_OPACITY = 0.3
DAYLIGHT_COLORS = {
    RiskLevel.HIGH.value: "#fbbf24",
    RiskLevel.MEDIUM.value: "#94a3b8",
    RiskLevel.LOW.value: "#64748b",
}

AIRFLOW_COLOR = "#0ea5e9"
AIRFLOW_STYLES = {
    AirflowStrength.WEAK.value: (1.5, 0.4),
    AirflowStrength.MODERATE.value: (2.0, 0.6),
    AirflowStrength.STRONG.value: (3.0, 0.9),
}

WINDOW_COLOR = "#0284c7"
SHADED_WINDOW_COLOR = "#334155"


# =============================================================================
# Data Models
# =============================================================================


@dataclass
class OverlayOptions:
    """Which diagnostic layers to draw."""

    heat: bool = False
    airflow: bool = False
    daylight: bool = False


@dataclass(frozen=True)
class Bounds:
    """Bounding box of all rooms, in meters."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def canvas_width(self) -> float:
        return (self.max_x - self.min_x) * SCALE + PADDING * 2

    @property
    def canvas_height(self) -> float:
        return (self.max_y - self.min_y) * SCALE + PADDING * 2

    def project(self, x: float, y: float) -> Tuple[float, float]:
        """Plan coordinates (m) to canvas coordinates (px)."""
        return (x - self.min_x) * SCALE + PADDING, (y - self.min_y) * SCALE + PADDING


@dataclass
class WindowMark:
    x1: float
    y1: float
    x2: float
    y2: float
    shaded: bool = False

    @property
    def color(self) -> str:
        return SHADED_WINDOW_COLOR if self.shaded else WINDOW_COLOR


@dataclass
class RoomShape:
    """A room as drawn on the canvas."""

    room_id: str
    name: str
    x: float
    y: float
    width: float
    height: float
    fill: str
    stroke: str
    heat_opacity: Optional[float] = None
    daylight_fill: Optional[str] = None
    windows: List[WindowMark] = field(default_factory=list)

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass
class AirflowLine:
    """Directional airflow arrow between two room centroids."""

    x1: float
    y1: float
    x2: float
    y2: float
    stroke_width: float
    opacity: float
    strength: str
    from_room: str
    to_room: str


@dataclass
class FloorPlanScene:
    """Everything needed to draw a floor plan."""

    title: str
    orientation: float
    width: float
    height: float
    bounds: Bounds
    rooms: List[RoomShape] = field(default_factory=list)
    airflow: List[AirflowLine] = field(default_factory=list)
    overlays: OverlayOptions = field(default_factory=OverlayOptions)


# =============================================================================
# Geometry
# =============================================================================


def compute_bounds(rooms: Sequence[Room]) -> Bounds:
    """Bounding box over all room rectangles; zero box for no rooms."""
    if not rooms:
        return Bounds(0.0, 0.0, 0.0, 0.0)
    return Bounds(
        min_x=min(room.x for room in rooms),
        min_y=min(room.y for room in rooms),
        max_x=max(room.x + room.width for room in rooms),
        max_y=max(room.y + room.height for room in rooms),
    )


def room_colors(room: Room) -> Tuple[str, str]:
    """(fill, stroke) for a room; unknown types use the default."""
    return ROOM_COLORS.get(room.room_type, DEFAULT_COLORS)


def room_centroid(room: Room, bounds: Bounds) -> Tuple[float, float]:
    """Canvas centroid of a room."""
    x, y = bounds.project(room.x, room.y)
    return x + room.width * SCALE / 2, y + room.height * SCALE / 2


def _window_marks(room: Room, x: float, y: float, width: float, height: float) -> List[WindowMark]:
    marks = []
    for window in room.windows:
        span = window.width * SCALE
        if window.side in (WallSide.NORTH.value, WallSide.SOUTH.value):
            center = x + window.position * width
            start = max(x, center - span / 2)
            end = min(x + width, center + span / 2)
            wall_y = y if window.side == WallSide.NORTH.value else y + height
            marks.append(WindowMark(start, wall_y, end, wall_y, window.shading))
        else:
            center = y + window.position * height
            start = max(y, center - span / 2)
            end = min(y + height, center + span / 2)
            wall_x = x if window.side == WallSide.WEST.value else x + width
            marks.append(WindowMark(wall_x, start, wall_x, end, window.shading))
    return marks


# =============================================================================
# Room Reference Resolution
# =============================================================================


def normalize_name(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def names_match(reference: str, room_name: str) -> bool:
    """Substring containment in either direction, after normalization.

    An empty reference matches nothing.
    """
    ref = normalize_name(reference)
    name = normalize_name(room_name)
    if not ref or not name:
        return False
    return ref in name or name in ref


def resolve_room_reference(
    reference: str,
    rooms: Sequence[Room],
    room_id: Optional[str] = None,
) -> Optional[Room]:
    """Resolve a diagnostic room label to a room.

    Args:
        reference: Free-text room label from the diagnostics
        rooms: Rooms in plan order
        room_id: Optional room id carried by the diagnostic

    Returns:
        The matched room, or None. Ties go to the first room in list order.
    """
    if room_id:
        for room in rooms:
            if room.id == room_id:
                return room

    ref = normalize_name(reference)
    if not ref:
        return None

    for room in rooms:
        if normalize_name(room.name) == ref:
            return room

    for room in rooms:
        if names_match(ref, room.name):
            return room

    return None


ZoneT = TypeVar("ZoneT")


def match_zone(room: Room, zones: Iterable[ZoneT]) -> Optional[ZoneT]:
    """Find the heat/daylight entry for a room.

    Preference: matching room id, then exact name, then substring match;
    first entry in list order within each tier.
    """
    zones = list(zones)
    for zone in zones:
        if getattr(zone, "room_id", None) and zone.room_id == room.id:
            return zone
    name = normalize_name(room.name)
    for zone in zones:
        if normalize_name(zone.room) == name and name:
            return zone
    for zone in zones:
        if names_match(zone.room, room.name):
            return zone
    return None


# =============================================================================
# Scene Building
# =============================================================================


def build_floor_plan_scene(plan: FloorPlan, overlays: Optional[OverlayOptions] = None) -> FloorPlanScene:
    """
    Project a floor plan into drawing coordinates.

    Args:
        plan: Floor plan to draw
        overlays: Diagnostic layers to include (default: none)

    Returns:
        FloorPlanScene with room shapes and airflow lines
    """
    overlays = overlays or OverlayOptions()
    rooms = plan.rooms
    bounds = compute_bounds(rooms)
    diagnostics = plan.diagnostics

    shapes = []
    for room in rooms:
        x, y = bounds.project(room.x, room.y)
        width = room.width * SCALE
        height = room.height * SCALE
        fill, stroke = room_colors(room)
        shape = RoomShape(
            room_id=room.id,
            name=room.name,
            x=x,
            y=y,
            width=width,
            height=height,
            fill=fill,
            stroke=stroke,
            windows=_window_marks(room, x, y, width, height),
        )

        if overlays.heat:
            zone = match_zone(room, diagnostics.heat_risk)
            if zone is not None:
                shape.heat_opacity = HEAT_OPACITY.get(zone.level, HEAT_OPACITY[RiskLevel.LOW.value])

        if overlays.daylight:
            zone = match_zone(room, diagnostics.daylight)
            if zone is not None:
                shape.daylight_fill = DAYLIGHT_COLORS.get(zone.quality, DAYLIGHT_COLORS[RiskLevel.LOW.value])

        shapes.append(shape)

    lines = []
    if overlays.airflow:
        for flow in diagnostics.airflow:
            source = resolve_room_reference(flow.from_room, rooms, flow.from_id)
            target = resolve_room_reference(flow.to_room, rooms, flow.to_id)
            if source is None or target is None:
                logger.debug("airflow_unresolved", from_room=flow.from_room, to_room=flow.to_room)
                continue
            stroke_width, opacity = AIRFLOW_STYLES.get(
                flow.strength, AIRFLOW_STYLES[AirflowStrength.MODERATE.value]
            )
            (x1, y1), (x2, y2) = room_centroid(source, bounds), room_centroid(target, bounds)
            lines.append(AirflowLine(
                x1=x1, y1=y1, x2=x2, y2=y2,
                stroke_width=stroke_width,
                opacity=opacity,
                strength=flow.strength,
                from_room=source.name,
                to_room=target.name,
            ))

    return FloorPlanScene(
        title=plan.design_title,
        orientation=plan.orientation,
        width=bounds.canvas_width,
        height=bounds.canvas_height,
        bounds=bounds,
        rooms=shapes,
        airflow=lines,
        overlays=overlays,
    )


# =============================================================================
# SVG Output
# =============================================================================


def get_jinja_env() -> Environment:
    """
    Create and configure Jinja2 environment.

    Returns:
        Configured Jinja2 Environment
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "svg"]),
    )
    return env


def render_floor_plan_svg(plan: FloorPlan, overlays: Optional[OverlayOptions] = None) -> str:
    """Render a floor plan as a standalone SVG document."""
    scene = build_floor_plan_scene(plan, overlays)
    template = get_jinja_env().get_template("floor_plan.svg")
    return template.render(scene=scene, airflow_color=AIRFLOW_COLOR, heat_color=HEAT_COLOR,
                           daylight_opacity=DAYLIGHT_OPACITY)

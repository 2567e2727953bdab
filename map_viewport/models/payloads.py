"""Typed option schema for the dynamic-map tool.

The tool receives a JSON object from the agent.  These ``TypedDict``
definitions make the contract explicit, and ``validate_map_options``
enforces the structural rules at runtime before the engine runs.

Coordinate *values* are deliberately not range-checked here: one bad
marker must not block the whole map, so per-feature coordinate problems
are left to the collector, which drops and reports them.

Usage::

    from map_viewport.models.payloads import validate_map_options

    validate_map_options(params)
"""

from __future__ import annotations

from typing import Any, Literal, NoReturn, NotRequired, TypedDict

from map_viewport.core.constants import MAX_CANVAS_PX, MIN_CANVAS_PX
from map_viewport.core.exceptions import ContractError

POLYGON_REFINEMENT_MESSAGE = (
    "For type='polygon', 'coordinates' array is required. "
    "For type='circle', both 'center' and 'radius' are required."
)
MIN_POLYGON_COORDINATES = 3
MIN_CIRCLE_RADIUS_M = 1.0
ROUTE_INFO_DETAIL_LEVELS = ("basic", "compact", "detailed", "distance-time")
DEFAULT_ROUTE_INFO_DETAIL = "basic"


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class LatLonInput(TypedDict):
    """A named-field coordinate, optionally labelled."""

    lat: float
    lon: float
    label: NotRequired[str]


class MarkerInput(TypedDict):
    lat: float
    lon: float
    label: NotRequired[str]
    color: NotRequired[str]
    priority: NotRequired[Literal["low", "normal", "high", "critical"]]


class RouteInput(TypedDict):
    """A route: ``points`` may mix ``{lat, lon}``, ``[lat, lon]`` and ``{coordinates: [lat, lon]}``."""

    points: list[Any]
    name: NotRequired[str]
    color: NotRequired[str]


class PolygonInput(TypedDict):
    """A polygon (``coordinates`` as ``[lon, lat]`` pairs) or a circle (``center`` + ``radius`` metres)."""

    type: NotRequired[Literal["polygon", "circle"]]
    coordinates: NotRequired[list[list[float]]]
    center: NotRequired[LatLonInput]
    radius: NotRequired[float]
    label: NotRequired[str]
    fillColor: NotRequired[str]
    strokeColor: NotRequired[str]
    strokeWidth: NotRequired[float]
    name: NotRequired[str]


class DynamicMapOptions(TypedDict):
    """Agent → ``dynamic-map`` tool."""

    bbox: NotRequired[list[float]]
    width: NotRequired[int]
    height: NotRequired[int]
    markers: NotRequired[list[MarkerInput]]
    routes: NotRequired[list[RouteInput | list[Any]]]
    route: NotRequired[list[Any]]
    polygons: NotRequired[list[PolygonInput]]
    isRoute: NotRequired[bool]
    origin: NotRequired[LatLonInput]
    destination: NotRequired[LatLonInput]
    waypoints: NotRequired[list[LatLonInput]]
    showLabels: NotRequired[bool]
    routeLabel: NotRequired[str]
    routeInfoDetail: NotRequired[Literal["basic", "compact", "detailed", "distance-time"]]
    use_orbis: NotRequired[bool]


_LIST_KEYS = ("markers", "routes", "route", "polygons", "waypoints")


# ---------------------------------------------------------------------------
# Runtime validation
# ---------------------------------------------------------------------------


def validate_map_options(raw: dict[str, Any]) -> None:
    """Validate the structure of dynamic-map tool options.

    Raises:
        ContractError: If a canvas dimension is out of range, ``bbox`` is
            not four numbers, ``routeInfoDetail`` is not a known level, a
            collection field is not a list, or a polygon entry breaks the
            polygon/circle refinement rule.
    """
    if not isinstance(raw, dict):
        _fail(f"Dynamic map options must be an object, got {type(raw).__name__}")

    for key in ("width", "height"):
        value = raw.get(key)
        if value is None:
            continue
        if not _is_number(value) or not MIN_CANVAS_PX <= value <= MAX_CANVAS_PX:
            _fail(f"{key} must be a number between {MIN_CANVAS_PX} and {MAX_CANVAS_PX}, got {value!r}")

    bbox = raw.get("bbox")
    if bbox is not None and (
        not isinstance(bbox, list) or len(bbox) != 4 or not all(_is_number(v) for v in bbox)
    ):
        _fail(f"bbox must contain exactly 4 numbers [west, south, east, north], got {bbox!r}")

    detail = raw.get("routeInfoDetail")
    if detail is not None and detail not in ROUTE_INFO_DETAIL_LEVELS:
        _fail(f"routeInfoDetail must be one of {list(ROUTE_INFO_DETAIL_LEVELS)}, got {detail!r}")

    for key in _LIST_KEYS:
        value = raw.get(key)
        if value is not None and not isinstance(value, list):
            _fail(f"{key} must be a list, got {type(value).__name__}")

    for index, polygon in enumerate(raw.get("polygons") or []):
        _validate_polygon(polygon, index)


def _validate_polygon(polygon: object, index: int) -> None:
    if not isinstance(polygon, dict):
        _fail(f"polygons[{index}] must be an object, got {type(polygon).__name__}")

    kind = polygon.get("type")
    if kind not in (None, "polygon", "circle"):
        _fail(f"polygons[{index}].type must be 'polygon' or 'circle', got {kind!r}")

    coordinates = polygon.get("coordinates")
    if kind == "polygon" and not isinstance(coordinates, list):
        _fail(f"polygons[{index}]: {POLYGON_REFINEMENT_MESSAGE}")
    if kind == "circle" and (polygon.get("center") is None or not _is_number(polygon.get("radius"))):
        _fail(f"polygons[{index}]: {POLYGON_REFINEMENT_MESSAGE}")

    if coordinates is not None:
        if not isinstance(coordinates, list) or len(coordinates) < MIN_POLYGON_COORDINATES:
            _fail(
                f"polygons[{index}].coordinates must contain at least "
                f"{MIN_POLYGON_COORDINATES} [longitude, latitude] pairs"
            )
        for pair in coordinates:
            if not isinstance(pair, list) or len(pair) != 2:
                _fail(f"polygons[{index}].coordinates entries must be [longitude, latitude] pairs")

    radius = polygon.get("radius")
    if radius is not None and (not _is_number(radius) or radius < MIN_CIRCLE_RADIUS_M):
        _fail(f"polygons[{index}].radius must be >= {MIN_CIRCLE_RADIUS_M:g} metres, got {radius!r}")


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _fail(message: str) -> NoReturn:
    raise ContractError(message, stage="dynamic_map", code="OPTIONS_INVALID")

"""Feature collection: walk raw markers, routes and polygons.

``parse_features`` resolves the tool's loosely-shaped feature arrays into
a typed ``FeatureSet``.  ``collect_points`` flattens that set into the
points the bounds calculator frames.

Rules:
- each marker contributes one point;
- each route (a bare vertex list or ``{"points": [...]}``) contributes one
  point per valid vertex;
- each polygon contributes one point per valid ring vertex, read
  ``[lon, lat]``;
- each circle (``type == "circle"`` with ``center`` and ``radius``)
  contributes its rasterised boundary ring.

Invalid items are dropped individually with a diagnostic.  Only an
entirely empty result is fatal (``NoValidGeometryError``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from map_viewport.core.constants import DEFAULT_CIRCLE_SEGMENTS
from map_viewport.core.exceptions import ValidationError
from map_viewport.framing.circle import InvalidCircleError, circle_points
from map_viewport.framing.coordinates import (
    extract,
    parse_lon_first,
    report_dropped,
    resolve_point,
)
from map_viewport.models.features import (
    CircleFeature,
    FeatureCounts,
    FeatureSet,
    Marker,
    PolygonFeature,
    Route,
)
from map_viewport.models.geometry import InvalidCoordinateError

if TYPE_CHECKING:
    from map_viewport.models.geometry import Point

logger = logging.getLogger("map_viewport.framing.collect")

CIRCLE_TYPE = "circle"


class NoValidGeometryError(ValidationError):
    """Raised when no valid point remains after dropping invalid features."""

    default_stage = "collect"
    default_code = "NO_VALID_GEOMETRY"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_features(
    markers: Sequence[object] | None = None,
    routes: Sequence[object] | None = None,
    polygons: Sequence[object] | None = None,
    *,
    segments: int = DEFAULT_CIRCLE_SEGMENTS,
) -> FeatureSet:
    """Resolve raw feature arrays into a ``FeatureSet``.

    Args:
        markers: Marker inputs (any point shape, optionally with
            ``label``/``color``).
        routes: Route inputs: vertex lists or ``{"points": [...]}`` objects.
        polygons: Polygon (``coordinates`` as ``[lon, lat]``) and circle
            (``type="circle"``, ``center``, ``radius`` metres) entries.
        segments: Boundary points per rasterised circle.

    Returns:
        The resolved features plus counts of what was supplied.
    """
    markers = list(markers or [])
    routes = list(routes or [])
    polygons = list(polygons or [])

    parsed_markers = [m for i, raw in enumerate(markers) if (m := _parse_marker(raw, i)) is not None]
    parsed_routes = [r for i, raw in enumerate(routes) if (r := _parse_route(raw, i)) is not None]

    parsed_polygons: list[PolygonFeature] = []
    parsed_circles: list[CircleFeature] = []
    circle_count = 0
    for index, raw in enumerate(polygons):
        if isinstance(raw, Mapping) and raw.get("type") == CIRCLE_TYPE:
            circle_count += 1
        polygon, circle = _parse_polygon_entry(raw, index, segments)
        if polygon is not None:
            parsed_polygons.append(polygon)
        if circle is not None:
            parsed_circles.append(circle)

    counts = FeatureCounts(
        markers=len(markers),
        routes=len(routes),
        polygons=len(polygons) - circle_count,
        circles=circle_count,
    )
    return FeatureSet(
        markers=tuple(parsed_markers),
        routes=tuple(parsed_routes),
        polygons=tuple(parsed_polygons),
        circles=tuple(parsed_circles),
        counts=counts,
    )


def collect_points(features: FeatureSet) -> list[Point]:
    """Flatten every feature's extremities into one point list.

    Raises:
        NoValidGeometryError: If the feature set yields no points.
    """
    points: list[Point] = [m.point for m in features.markers]
    for route in features.routes:
        points.extend(route.points)
    for polygon in features.polygons:
        points.extend(polygon.points)
    for circle in features.circles:
        points.extend(circle.ring)

    if not points:
        msg = "No valid coordinates found to calculate bounds"
        raise NoValidGeometryError(msg)

    logger.debug(
        "Points collected | markers=%d | routes=%d | polygons=%d | circles=%d | points=%d",
        len(features.markers),
        len(features.routes),
        len(features.polygons),
        len(features.circles),
        len(points),
    )
    return points


def collect(
    markers: Sequence[object] | None = None,
    routes: Sequence[object] | None = None,
    polygons: Sequence[object] | None = None,
    *,
    segments: int = DEFAULT_CIRCLE_SEGMENTS,
) -> list[Point]:
    """Parse raw feature arrays and return their points in one step.

    Raises:
        NoValidGeometryError: If no valid point was found.
    """
    return collect_points(parse_features(markers, routes, polygons, segments=segments))


# ---------------------------------------------------------------------------
# Per-variant parsing
# ---------------------------------------------------------------------------


def _parse_marker(raw: object, index: int) -> Marker | None:
    point = extract(raw, index, "marker")
    if point is None:
        return None
    return Marker(
        point=point,
        index=index,
        label=_text(raw, "label"),
        color=_text(raw, "color"),
    )


def _parse_route(raw: object, index: int) -> Route | None:
    if isinstance(raw, list | tuple):
        vertices: Sequence[object] = raw
    elif isinstance(raw, Mapping) and isinstance(raw.get("points"), list | tuple):
        vertices = raw["points"]
    else:
        report_dropped("route", index, "Route must be a vertex list or an object with a 'points' list")
        return None

    points = [
        p
        for vertex_index, vertex in enumerate(vertices)
        if (p := extract(vertex, f"{index}-{vertex_index}", "route point")) is not None
    ]
    if not points:
        report_dropped("route", index, "Route has no valid vertices")
        return None
    return Route(points=tuple(points), index=index, name=_text(raw, "name"))


def _parse_polygon_entry(
    raw: object, index: int, segments: int
) -> tuple[PolygonFeature | None, CircleFeature | None]:
    if not isinstance(raw, Mapping):
        report_dropped("polygon", index, f"Polygon entry must be an object, got {type(raw).__name__}")
        return None, None

    polygon: PolygonFeature | None = None
    circle: CircleFeature | None = None
    matched = False

    coordinates = raw.get("coordinates")
    if isinstance(coordinates, list | tuple):
        matched = True
        ring: list[Point] = []
        for vertex_index, pair in enumerate(coordinates):
            try:
                if not isinstance(pair, list | tuple):
                    msg = f"Ring vertex must be a [longitude, latitude] pair, got {type(pair).__name__}"
                    raise InvalidCoordinateError(msg)
                ring.append(parse_lon_first(pair))
            except InvalidCoordinateError as exc:
                report_dropped("polygon vertex", f"{index}-{vertex_index}", exc.message)
        if ring:
            polygon = PolygonFeature(points=tuple(ring), index=index, label=_text(raw, "label"))

    if raw.get("type") == CIRCLE_TYPE and raw.get("center") is not None and raw.get("radius") is not None:
        matched = True
        circle = _parse_circle(raw, index, segments)

    if not matched:
        report_dropped("polygon", index, "No polygon coordinates or circle center/radius")
    return polygon, circle


def _parse_circle(raw: Mapping[str, object], index: int, segments: int) -> CircleFeature | None:
    try:
        center = resolve_point(raw["center"])
        ring = circle_points(center.lat, center.lon, raw["radius"], segments)  # type: ignore[arg-type]
    except (InvalidCoordinateError, InvalidCircleError) as exc:
        report_dropped("circle", index, exc.message)
        return None
    return CircleFeature(
        center=center,
        radius_m=float(raw["radius"]),  # type: ignore[arg-type]
        ring=tuple(ring),
        index=index,
        label=_text(raw, "label"),
    )


def _text(raw: object, key: str) -> str:
    if isinstance(raw, Mapping):
        value = raw.get(key)
        if value is not None:
            return str(value)
    return ""

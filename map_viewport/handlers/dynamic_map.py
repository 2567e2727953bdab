"""Dynamic-map tool handler.

Turns the agent's ``dynamic-map`` options into a ``RenderPlan``: the
viewport plus the GeoJSON layers the external renderer draws.  Pixels
are not produced here.

Request resolution, in order:

1. structural option validation (``validate_map_options``);
2. route-planning mode (``isRoute``) replaces the markers with
   ``Start`` / ``Waypoint n`` / ``End`` pins;
3. a legacy single ``route`` becomes ``routes=[route]`` when ``routes``
   is absent or empty;
4. the viewport is framed from ``bbox`` when given, otherwise from the
   features;
5. the base-map backend is ``orbis`` when the request or the
   configuration asks for it.

Every ``ViewportError`` becomes an error tool result whose message is
preserved verbatim.  Anything else propagates.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from map_viewport.core.config import ViewportConfig
from map_viewport.core.constants import BACKEND_GENESIS, BACKEND_ORBIS
from map_viewport.core.exceptions import ValidationError, ViewportError
from map_viewport.framing.collect import parse_features
from map_viewport.framing.coordinates import extract
from map_viewport.framing.viewport import compose_viewport
from map_viewport.handlers.layers import build_layers
from map_viewport.models.payloads import DEFAULT_ROUTE_INFO_DETAIL, validate_map_options
from map_viewport.models.viewport import RenderPlan

logger = logging.getLogger("map_viewport.handlers.dynamic_map")

START_COLOR = "#22c55e"
WAYPOINT_COLOR = "#f97316"
END_COLOR = "#ef4444"


class RoutePlanningError(ValidationError):
    """Raised when route-planning mode lacks usable origin/destination."""

    default_stage = "route_planning"
    default_code = "ROUTE_ENDPOINTS_INVALID"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def handle_dynamic_map(params: dict[str, Any], config: ViewportConfig | None = None) -> dict[str, Any]:
    """Run one dynamic-map tool call and wrap the outcome as a tool result.

    Returns:
        ``{"content": [{"type": "text", "text": <json>}], "isError": bool}``.
        On success the JSON is the serialised ``RenderPlan``; on a
        domain error it is ``{"error": message, ...error fields}``.
    """
    logger.info(
        "Processing dynamic map request | use_orbis=%s",
        bool(params.get("use_orbis")) if isinstance(params, Mapping) else False,
    )
    try:
        plan = build_render_plan(params, config)
    except ViewportError as exc:
        logger.error(
            "Dynamic map request failed | code=%s | stage=%s | error=%s",
            exc.code,
            exc.stage,
            exc.message,
        )
        return _tool_result({"error": exc.message, **exc.to_error_dict()}, is_error=True)

    return _tool_result(plan.to_dict(), is_error=False)


def build_render_plan(params: dict[str, Any], config: ViewportConfig | None = None) -> RenderPlan:
    """Validate and resolve tool options, frame the viewport, build layers.

    Raises:
        ContractError: If the options break the tool schema.
        RoutePlanningError: If route-planning mode lacks valid endpoints.
        InvalidBboxError: If an explicit bbox is malformed.
        NoValidGeometryError: If no feature yields a valid point.
    """
    config = config or ViewportConfig()
    validate_map_options(params)

    width = int(params.get("width") or config.default_width)
    height = int(params.get("height") or config.default_height)

    features = parse_features(
        resolve_markers(params),
        resolve_routes(params),
        params.get("polygons"),
        segments=config.circle_segments,
    )

    viewport = compose_viewport(
        features,
        bbox=params.get("bbox"),
        width=width,
        height=height,
        config=config,
    )

    backend = BACKEND_ORBIS if params.get("use_orbis") or config.is_orbis else BACKEND_GENESIS
    plan = RenderPlan(
        viewport=viewport,
        width=width,
        height=height,
        backend=backend,
        show_labels=bool(params.get("showLabels", False)),
        route_info_detail=params.get("routeInfoDetail") or DEFAULT_ROUTE_INFO_DETAIL,
        layers=build_layers(features, route_label=params.get("routeLabel") or ""),
    )

    logger.info(
        "Render plan built | backend=%s | canvas=%dx%d | markers=%d | routes=%d | polygons=%d | circles=%d | zoom=%.2f",
        backend,
        width,
        height,
        len(features.markers),
        len(features.routes),
        len(features.polygons),
        len(features.circles),
        viewport.zoom,
    )
    return plan


def resolve_markers(params: Mapping[str, Any]) -> list[Any]:
    """Markers to frame: the supplied ones, or route-planning pins.

    Raises:
        RoutePlanningError: If ``isRoute`` is set without a valid origin
            and destination.
    """
    if not params.get("isRoute"):
        return list(params.get("markers") or [])

    origin = params.get("origin")
    destination = params.get("destination")
    if not origin or not destination:
        msg = "Route planning mode requires both origin and destination coordinates"
        raise RoutePlanningError(msg)

    start = extract(origin, 0, "origin")
    end = extract(destination, 0, "destination")
    if start is None or end is None:
        msg = "Invalid origin or destination coordinates"
        raise RoutePlanningError(msg)

    markers = [_pin(start.lat, start.lon, _label(origin) or "Start", START_COLOR)]
    for index, waypoint in enumerate(params.get("waypoints") or []):
        point = extract(waypoint, index, "waypoint")
        if point is not None:
            markers.append(_pin(point.lat, point.lon, _label(waypoint) or f"Waypoint {index + 1}", WAYPOINT_COLOR))
    markers.append(_pin(end.lat, end.lon, _label(destination) or "End", END_COLOR))
    return markers


def resolve_routes(params: Mapping[str, Any]) -> list[Any]:
    """Routes to frame, folding a legacy single ``route`` into the list."""
    routes = params.get("routes")
    if routes:
        return list(routes)
    route = params.get("route")
    if route:
        return [route]
    return []


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _pin(lat: float, lon: float, label: str, color: str) -> dict[str, Any]:
    return {"lat": lat, "lon": lon, "label": label, "color": color}


def _label(raw: object) -> str:
    if isinstance(raw, Mapping) and raw.get("label"):
        return str(raw["label"])
    return ""


def _tool_result(payload: dict[str, Any], *, is_error: bool) -> dict[str, Any]:
    return {
        "content": [{"type": "text", "text": json.dumps(payload)}],
        "isError": is_error,
    }

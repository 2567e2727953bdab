"""GeoJSON layers handed to the external renderer.

The renderer draws three FeatureCollections on top of the base map:

- ``markers``: one Point per valid marker;
- ``routes``: one LineString per route with at least two valid vertices;
- ``polygons``: one Polygon per polygon ring and per rasterised circle.

Geometries are built with shapely and serialised with
``shapely.geometry.mapping`` so the output is plain, JSON-ready GeoJSON
in ``[lon, lat]`` order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shapely.geometry import LineString, Polygon, mapping
from shapely.geometry import Point as ShapelyPoint

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from map_viewport.models.features import (
        CircleFeature,
        FeatureSet,
        Marker,
        PolygonFeature,
        Route,
    )
    from map_viewport.models.geometry import Point

DEFAULT_MARKER_COLOR = "#ff4444"
MIN_ROUTE_VERTICES = 2
MIN_RING_VERTICES = 3

KIND_POLYGON = "polygon"
KIND_CIRCLE = "circle"


def build_layers(features: FeatureSet, *, route_label: str = "") -> dict[str, dict[str, Any]]:
    """Build every renderer layer for one resolved feature set.

    Args:
        features: Resolved features of the request.
        route_label: Label applied to every route when given
            (the tool's ``routeLabel`` option).

    Returns:
        ``{"markers": fc, "routes": fc, "polygons": fc}``, each a GeoJSON
        FeatureCollection.
    """
    return {
        "markers": marker_layer(features.markers),
        "routes": route_layer(features.routes, route_label=route_label),
        "polygons": polygon_layer(features.polygons, features.circles),
    }


def marker_layer(markers: Iterable[Marker]) -> dict[str, Any]:
    return _collection(
        _feature(
            ShapelyPoint(marker.point.to_lon_lat()),
            id=marker.index,
            label=marker.label or f"Marker {marker.index + 1}",
            color=marker.color or DEFAULT_MARKER_COLOR,
        )
        for marker in markers
    )


def route_layer(routes: Iterable[Route], *, route_label: str = "") -> dict[str, Any]:
    return _collection(
        _feature(
            LineString(_lon_lat(route.points)),
            id=route.index,
            label=route_label or route.name or f"Route {route.index + 1}",
        )
        for route in routes
        if len(route.points) >= MIN_ROUTE_VERTICES
    )


def polygon_layer(
    polygons: Iterable[PolygonFeature],
    circles: Iterable[CircleFeature],
) -> dict[str, Any]:
    features = [
        _feature(
            Polygon(_closed_ring(polygon.points)),
            id=polygon.index,
            kind=KIND_POLYGON,
            label=polygon.label,
        )
        for polygon in polygons
        if len(polygon.points) >= MIN_RING_VERTICES
    ]
    features.extend(
        _feature(
            Polygon(_closed_ring(circle.ring)),
            id=circle.index,
            kind=KIND_CIRCLE,
            label=circle.label,
        )
        for circle in circles
        if len(circle.ring) >= MIN_RING_VERTICES
    )
    return _collection(features)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _lon_lat(points: Sequence[Point]) -> list[tuple[float, float]]:
    return [p.to_lon_lat() for p in points]


def _closed_ring(points: Sequence[Point]) -> list[tuple[float, float]]:
    ring = _lon_lat(points)
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def _feature(geometry: Any, **properties: Any) -> dict[str, Any]:
    return {"type": "Feature", "geometry": mapping(geometry), "properties": properties}


def _collection(features: Iterable[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}

"""Typed map features: the resolved form of the tool's heterogeneous input.

Raw markers, routes and polygon/circle entries arrive as loosely-shaped
JSON.  ``map_viewport.framing.collect.parse_features`` resolves them once
into these variants; nothing downstream inspects raw shapes again.

- ``Marker``: a single point with display metadata.
- ``Route``: an ordered polyline of points.
- ``PolygonFeature``: a ring of points (read lon-first from input).
- ``CircleFeature``: a centre and radius plus its rasterised ring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from map_viewport.models.geometry import Point


@dataclass(frozen=True, slots=True)
class Marker:
    """A point marker.

    Attributes:
        point: Marker location.
        index: Zero-based index in the supplied ``markers`` list.
        label: Optional display label.
        color: Optional display colour (CSS).
    """

    point: Point
    index: int = 0
    label: str = ""
    color: str = ""


@dataclass(frozen=True, slots=True)
class Route:
    """A polyline made of the route's valid vertices, in order."""

    points: tuple[Point, ...]
    index: int = 0
    name: str = ""


@dataclass(frozen=True, slots=True)
class PolygonFeature:
    """A polygon ring made of its valid vertices, in order."""

    points: tuple[Point, ...]
    index: int = 0
    label: str = ""


@dataclass(frozen=True, slots=True)
class CircleFeature:
    """A geodesic circle and its rasterised boundary ring.

    Attributes:
        center: Circle centre.
        radius_m: Radius in metres (> 0).
        ring: Boundary points produced by ``circle_points``.
    """

    center: Point
    radius_m: float
    ring: tuple[Point, ...]
    index: int = 0
    label: str = ""


@dataclass(frozen=True, slots=True)
class FeatureCounts:
    """Counts of *supplied* feature inputs, before invalid ones are dropped.

    The padding heuristic keys off what the caller asked to show, so a
    dropped marker still counts towards ``markers``.
    """

    markers: int = 0
    routes: int = 0
    polygons: int = 0
    circles: int = 0

    @property
    def has_routes(self) -> bool:
        return self.routes > 0


@dataclass(frozen=True, slots=True)
class FeatureSet:
    """All resolved features of one request, grouped by variant."""

    markers: tuple[Marker, ...] = ()
    routes: tuple[Route, ...] = ()
    polygons: tuple[PolygonFeature, ...] = ()
    circles: tuple[CircleFeature, ...] = ()
    counts: FeatureCounts = field(default_factory=FeatureCounts)

    @property
    def is_empty(self) -> bool:
        return not (self.markers or self.routes or self.polygons or self.circles)

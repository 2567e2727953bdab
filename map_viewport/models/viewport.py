"""Viewport output models.

- ``Viewport``: the ``{bounds, center, zoom}`` triple that positions a map canvas.
- ``RenderPlan``: a viewport plus canvas size, base-map backend and the
  GeoJSON layers the external renderer draws on top.

Both are request-scoped values: computed fresh per request, never
mutated or cached.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from map_viewport.core.constants import MAX_ZOOM, MIN_ZOOM
from map_viewport.models.geometry import Bounds, ModelValidationError


@dataclass(frozen=True, slots=True)
class Viewport:
    """What geographic region a rendered canvas shows.

    Attributes:
        bounds: Padded, clamped bounds.
        center: Midpoint of ``bounds`` as ``(lon, lat)``.
        zoom: Real-valued zoom level in ``[MIN_ZOOM, MAX_ZOOM]``; callers may round.
    """

    bounds: Bounds
    center: tuple[float, float]
    zoom: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.zoom) or not MIN_ZOOM <= self.zoom <= MAX_ZOOM:
            raise ModelValidationError(
                "Viewport", "zoom", self.zoom, f"must be in [{MIN_ZOOM:g}, {MAX_ZOOM:g}]"
            )

    @classmethod
    def from_bounds(cls, bounds: Bounds, zoom: float) -> Viewport:
        """Build a viewport centred on the midpoint of ``bounds``."""
        return cls(bounds=bounds, center=bounds.center, zoom=zoom)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bounds": self.bounds.to_dict(),
            "center": list(self.center),
            "zoom": self.zoom,
        }


@dataclass(frozen=True, slots=True)
class RenderPlan:
    """Everything the downstream renderer needs to produce pixels.

    Attributes:
        viewport: Where to position the canvas.
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        backend: Base-map family (``genesis`` or ``orbis``).
        show_labels: Whether the renderer should draw feature labels.
        route_info_detail: How much route information the renderer annotates
            (``basic``, ``compact``, ``detailed`` or ``distance-time``).
        layers: GeoJSON FeatureCollections keyed by layer name
            (``markers``, ``routes``, ``polygons``).
    """

    viewport: Viewport
    width: int
    height: int
    backend: str
    show_labels: bool = False
    route_info_detail: str = "basic"
    layers: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.viewport.to_dict(),
            "width": self.width,
            "height": self.height,
            "backend": self.backend,
            "showLabels": self.show_labels,
            "routeInfoDetail": self.route_info_detail,
            "layers": self.layers,
        }

"""Data models and schemas.

Defines the value objects exchanged through the engine:
- Point, Bounds: validated WGS 84 geometry
- Marker, Route, PolygonFeature, CircleFeature: resolved feature variants
- Viewport, RenderPlan: engine output and renderer hand-off
- DynamicMapOptions: the dynamic-map tool's option schema
"""

from map_viewport.models.features import (
    CircleFeature,
    FeatureCounts,
    FeatureSet,
    Marker,
    PolygonFeature,
    Route,
)
from map_viewport.models.geometry import (
    Bounds,
    InvalidCoordinateError,
    ModelValidationError,
    Point,
)
from map_viewport.models.viewport import RenderPlan, Viewport

__all__ = [
    "Bounds",
    "CircleFeature",
    "FeatureCounts",
    "FeatureSet",
    "InvalidCoordinateError",
    "Marker",
    "ModelValidationError",
    "Point",
    "PolygonFeature",
    "RenderPlan",
    "Route",
    "Viewport",
]

"""Viewport engine configuration loaded from environment variables.

All configuration values have defaults matching the dynamic-map tool
contract.  The engine itself never reads the environment: a
``ViewportConfig`` is built once at server startup and threaded
explicitly into the composer and the tool handler.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad settings surface at startup rather than
    on the first tool call.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from map_viewport.core.constants import (
    BACKEND_GENESIS,
    BACKEND_ORBIS,
    DEFAULT_CIRCLE_SEGMENTS,
    DEFAULT_HEIGHT_PX,
    DEFAULT_WIDTH_PX,
    DEFAULT_ZOOM_PADDING_PX,
    MAP_BACKENDS,
    MAX_CANVAS_PX,
    MIN_CANVAS_PX,
    ZoomStrategy,
)
from map_viewport.core.exceptions import ViewportError

MIN_CIRCLE_SEGMENTS = 3


class ConfigValidationError(ViewportError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ViewportConfig:
    """Immutable engine configuration.

    Attributes:
        default_width: Canvas width in pixels when the caller gives none.
        default_height: Canvas height in pixels when the caller gives none.
        zoom_padding_px: Pixel inset kept free on each canvas edge by the zoom solver.
        circle_segments: Vertices used to rasterise each circle.
        zoom_strategy: Latitude treatment in the zoom solver.
        maps_backend: Base-map family handed to the renderer (``genesis`` or ``orbis``).
        enable_dynamic_maps: Whether the dynamic-map tool is registered.
        log_level: Root logging level name for the server process.
    """

    default_width: int = DEFAULT_WIDTH_PX
    default_height: int = DEFAULT_HEIGHT_PX
    zoom_padding_px: float = DEFAULT_ZOOM_PADDING_PX
    circle_segments: int = DEFAULT_CIRCLE_SEGMENTS
    zoom_strategy: ZoomStrategy = ZoomStrategy.LINEAR
    maps_backend: str = BACKEND_GENESIS
    enable_dynamic_maps: bool = True
    log_level: str = "INFO"

    @property
    def is_orbis(self) -> bool:
        return self.maps_backend == BACKEND_ORBIS

    @classmethod
    def from_env(cls) -> ViewportConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or not one
                of the allowed choices.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``MAP_DEFAULT_WIDTH=wide``).
        """
        strategy_raw = os.getenv("MAP_ZOOM_STRATEGY", ZoomStrategy.LINEAR.value).strip().lower()
        try:
            strategy = ZoomStrategy(strategy_raw)
        except ValueError as exc:
            raise ConfigValidationError(
                "MAP_ZOOM_STRATEGY",
                strategy_raw,
                f"must be one of {[s.value for s in ZoomStrategy]}",
            ) from exc

        config = cls(
            default_width=int(os.getenv("MAP_DEFAULT_WIDTH", str(DEFAULT_WIDTH_PX))),
            default_height=int(os.getenv("MAP_DEFAULT_HEIGHT", str(DEFAULT_HEIGHT_PX))),
            zoom_padding_px=float(os.getenv("MAP_ZOOM_PADDING_PX", str(DEFAULT_ZOOM_PADDING_PX))),
            circle_segments=int(os.getenv("MAP_CIRCLE_SEGMENTS", str(DEFAULT_CIRCLE_SEGMENTS))),
            zoom_strategy=strategy,
            maps_backend=os.getenv("MAPS", BACKEND_GENESIS).strip().lower() or BACKEND_GENESIS,
            enable_dynamic_maps=os.getenv("ENABLE_DYNAMIC_MAPS", "true").strip().lower() != "false",
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        )
        _validate(config)
        return config


def _validate(config: ViewportConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not MIN_CANVAS_PX <= config.default_width <= MAX_CANVAS_PX:
        raise ConfigValidationError(
            "MAP_DEFAULT_WIDTH",
            config.default_width,
            f"must be between {MIN_CANVAS_PX} and {MAX_CANVAS_PX} (pixels)",
        )

    if not MIN_CANVAS_PX <= config.default_height <= MAX_CANVAS_PX:
        raise ConfigValidationError(
            "MAP_DEFAULT_HEIGHT",
            config.default_height,
            f"must be between {MIN_CANVAS_PX} and {MAX_CANVAS_PX} (pixels)",
        )

    if config.zoom_padding_px < 0:
        raise ConfigValidationError(
            "MAP_ZOOM_PADDING_PX",
            config.zoom_padding_px,
            "must be >= 0 (pixels)",
        )

    if config.circle_segments < MIN_CIRCLE_SEGMENTS:
        raise ConfigValidationError(
            "MAP_CIRCLE_SEGMENTS",
            config.circle_segments,
            f"must be >= {MIN_CIRCLE_SEGMENTS}",
        )

    if config.maps_backend not in MAP_BACKENDS:
        raise ConfigValidationError(
            "MAPS",
            config.maps_backend,
            f"must be one of {list(MAP_BACKENDS)}",
        )

    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ConfigValidationError(
            "LOG_LEVEL",
            config.log_level,
            "must be a standard logging level name",
        )

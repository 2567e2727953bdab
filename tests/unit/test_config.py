"""Tests for viewport engine configuration.

Covers:
- Default values match the dynamic-map tool contract
- Loading from environment variables
- Type coercion (string env vars → numeric fields)
- Fail-fast range validation
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from map_viewport.core.config import ConfigValidationError, ViewportConfig
from map_viewport.core.constants import ZoomStrategy


class TestViewportConfigDefaults:
    """Verify default configuration values."""

    def test_default_canvas(self) -> None:
        cfg = ViewportConfig()
        assert cfg.default_width == 800
        assert cfg.default_height == 600

    def test_default_zoom_padding(self) -> None:
        assert ViewportConfig().zoom_padding_px == 80

    def test_default_circle_segments(self) -> None:
        assert ViewportConfig().circle_segments == 64

    def test_default_strategy_is_linear(self) -> None:
        assert ViewportConfig().zoom_strategy is ZoomStrategy.LINEAR

    def test_default_backend(self) -> None:
        cfg = ViewportConfig()
        assert cfg.maps_backend == "genesis"
        assert cfg.is_orbis is False

    def test_dynamic_maps_enabled_by_default(self) -> None:
        assert ViewportConfig().enable_dynamic_maps is True

    def test_frozen(self) -> None:
        cfg = ViewportConfig()
        with pytest.raises(AttributeError):
            cfg.default_width = 1024  # type: ignore[misc]


class TestViewportConfigFromEnv:
    """Verify loading from environment variables."""

    def test_loads_from_environment(self) -> None:
        """All env vars are read and coerced to correct types."""
        env = {
            "MAP_DEFAULT_WIDTH": "1024",
            "MAP_DEFAULT_HEIGHT": "768",
            "MAP_ZOOM_PADDING_PX": "40.5",
            "MAP_CIRCLE_SEGMENTS": "32",
            "MAP_ZOOM_STRATEGY": "Mercator",
            "MAPS": "ORBIS",
            "ENABLE_DYNAMIC_MAPS": "true",
            "LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = ViewportConfig.from_env()

        assert cfg.default_width == 1024
        assert cfg.default_height == 768
        assert cfg.zoom_padding_px == 40.5
        assert cfg.circle_segments == 32
        assert cfg.zoom_strategy is ZoomStrategy.MERCATOR
        assert cfg.maps_backend == "orbis"
        assert cfg.is_orbis is True
        assert cfg.enable_dynamic_maps is True
        assert cfg.log_level == "DEBUG"

    def test_defaults_when_env_empty(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = ViewportConfig.from_env()
        assert cfg == ViewportConfig()

    @pytest.mark.parametrize("value", ["false", "FALSE", " False "])
    def test_dynamic_maps_disabled(self, value: str) -> None:
        with patch.dict(os.environ, {"ENABLE_DYNAMIC_MAPS": value}, clear=True):
            assert ViewportConfig.from_env().enable_dynamic_maps is False

    @pytest.mark.parametrize("value", ["0", "no", "yes", ""])
    def test_anything_but_false_enables(self, value: str) -> None:
        with patch.dict(os.environ, {"ENABLE_DYNAMIC_MAPS": value}, clear=True):
            assert ViewportConfig.from_env().enable_dynamic_maps is True

    def test_non_numeric_width_raises_value_error(self) -> None:
        with patch.dict(os.environ, {"MAP_DEFAULT_WIDTH": "wide"}, clear=True), pytest.raises(ValueError):
            ViewportConfig.from_env()


class TestViewportConfigValidation:
    """Fail-fast range validation."""

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("MAP_DEFAULT_WIDTH", "99"),
            ("MAP_DEFAULT_WIDTH", "2049"),
            ("MAP_DEFAULT_HEIGHT", "50"),
            ("MAP_ZOOM_PADDING_PX", "-1"),
            ("MAP_CIRCLE_SEGMENTS", "2"),
            ("MAP_ZOOM_STRATEGY", "spherical"),
            ("MAPS", "bing"),
            ("LOG_LEVEL", "LOUD"),
        ],
    )
    def test_out_of_range_raises(self, key: str, value: str) -> None:
        with patch.dict(os.environ, {key: value}, clear=True):
            with pytest.raises(ConfigValidationError) as exc_info:
                ViewportConfig.from_env()
        assert exc_info.value.key == key

    def test_error_message_names_key_and_value(self) -> None:
        with patch.dict(os.environ, {"MAP_CIRCLE_SEGMENTS": "1"}, clear=True):
            with pytest.raises(ConfigValidationError, match=r"MAP_CIRCLE_SEGMENTS=1: must be >= 3"):
                ViewportConfig.from_env()

    def test_boundary_values_accepted(self) -> None:
        env = {
            "MAP_DEFAULT_WIDTH": "100",
            "MAP_DEFAULT_HEIGHT": "2048",
            "MAP_ZOOM_PADDING_PX": "0",
            "MAP_CIRCLE_SEGMENTS": "3",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = ViewportConfig.from_env()
        assert cfg.default_width == 100
        assert cfg.default_height == 2048
        assert cfg.zoom_padding_px == 0
        assert cfg.circle_segments == 3

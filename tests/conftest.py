"""Shared fixtures for gridkiosk tests."""

from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from gridkiosk.display.models import Display, DisplayTopology
from gridkiosk.layout.composer import LayoutComposer
from gridkiosk.layout.models import LayoutDocument
from gridkiosk.layout.registry import ContentRegionRegistry
from gridkiosk.settings.models import PlayerSettings


@pytest.fixture
def layout_mapping() -> dict[str, Any]:
    """Two regions side by side in a 2x1 grid."""
    return {
        "layout": {"columns": ["1fr", "1fr"], "rows": ["1fr"]},
        "screens": [
            {"id": "a", "content": "https://example.com/a", "gridArea": "1 / 1 / 2 / 2"},
            {"id": "b", "content": "https://example.com/b", "gridArea": "1 / 2 / 2 / 3"},
        ],
    }


@pytest.fixture
def span_mapping(layout_mapping: dict[str, Any]) -> dict[str, Any]:
    return {**layout_mapping, "settings": {"spanMonitors": True}}


@pytest.fixture
def layout_document(layout_mapping: dict[str, Any]) -> LayoutDocument:
    return LayoutDocument.from_mapping(layout_mapping)


@pytest.fixture
def registry() -> ContentRegionRegistry:
    return ContentRegionRegistry()


@pytest.fixture
def composer(registry: ContentRegionRegistry) -> LayoutComposer:
    return LayoutComposer(registry)


@pytest.fixture
def two_displays() -> DisplayTopology:
    """Two 1920x1080 displays side by side, the left one primary."""
    return DisplayTopology(
        displays=(
            Display(0, 0, 0, 1920, 1080, is_primary=True, name="HDMI-1"),
            Display(1, 1920, 0, 1920, 1080, name="HDMI-2"),
        ),
        source="test",
    )


@pytest.fixture
def presentation_surface() -> Mock:
    """Presentation surface whose requests succeed."""
    surface = Mock()
    surface.move_to = AsyncMock()
    surface.request_fullscreen = AsyncMock()
    surface.exit_fullscreen = AsyncMock()
    return surface


@pytest.fixture
def player_settings() -> PlayerSettings:
    """Settings isolated from the environment."""
    return PlayerSettings(
        _env_file=None,
        config_path="config.json",
        detection={"sources": ["xrandr"], "x_display": ":99"},
        viewport={"width": 1280, "height": 720},
    )

"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Sample config fixtures
- Tree builders for boundary tests
- Global test configuration
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Callable

import pytest
from dotenv import load_dotenv

if TYPE_CHECKING:
    from widgy.schema import WidgetConfig, WidgetNode
    from widgy.storage import FileConfigStore

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Sample Config Fixtures
# =============================================================================


@pytest.fixture
def simple_clock() -> WidgetConfig:
    """A fresh copy of the simple clock sample."""
    from widgy.samples import SIMPLE_CLOCK

    return SIMPLE_CLOCK.model_copy(deep=True)


@pytest.fixture
def weather_widget() -> WidgetConfig:
    """A fresh copy of the weather sample."""
    from widgy.samples import WEATHER_WIDGET

    return WEATHER_WIDGET.model_copy(deep=True)


@pytest.fixture
def battery_widget() -> WidgetConfig:
    """A fresh copy of the battery gauge sample."""
    from widgy.samples import BATTERY_WIDGET

    return BATTERY_WIDGET.model_copy(deep=True)


@pytest.fixture
def sample_configs() -> list[WidgetConfig]:
    """Fresh copies of every sample config."""
    from widgy.samples import ALL_SAMPLES

    return [config.model_copy(deep=True) for config in ALL_SAMPLES]


# =============================================================================
# Tree Builders
# =============================================================================


@pytest.fixture
def make_config() -> Callable[..., WidgetConfig]:
    """Factory wrapping a root node in a minimal config.

    Returns:
        Callable taking a node (and optional config fields) and returning
        a WidgetConfig.
    """
    from widgy.schema import WidgetConfig

    def _make(root: WidgetNode, **fields) -> WidgetConfig:
        return WidgetConfig(name=fields.pop("name", "Test Widget"), root=root, **fields)

    return _make


@pytest.fixture
def nested_padding() -> Callable[[int], WidgetNode]:
    """Factory for a Text wrapped in `n` Padding nodes (tree depth n + 1)."""
    from widgy.schema import PaddingNode, PaddingProperties, TextNode, TextProperties

    def _build(wrappers: int) -> WidgetNode:
        node: WidgetNode = TextNode(properties=TextProperties(content="deep"))
        for _ in range(wrappers):
            node = PaddingNode(properties=PaddingProperties(child=node))
        return node

    return _build


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Empty directory for a config store."""
    path = tmp_path / "widgets"
    path.mkdir()
    return path


@pytest.fixture
def file_store(store_dir: Path) -> FileConfigStore:
    """A FileConfigStore rooted in a temporary directory."""
    from widgy.storage import FileConfigStore

    return FileConfigStore(store_dir)

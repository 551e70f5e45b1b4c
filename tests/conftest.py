# tests/conftest.py

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for test imports like `import mapping`, `import nav`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
CONFIG_PATH = PROJECT_ROOT / "config" / "navigation.yaml"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture
def unit_index():
    """8x8 index at the origin with unit-sized cells."""
    from mapping.quadtree import OccupancyQuadTree

    return OccupancyQuadTree(origin=(0.0, 0.0), extent=8.0, max_depth=3)


@pytest.fixture
def navigation_config() -> Path:
    return CONFIG_PATH

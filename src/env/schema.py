# NavigationProfile and its section dataclasses
# src/env/schema.py

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class IndexConfig:
    """Geometry of the occupancy quadtree."""
    origin: Tuple[float, float] = (-80.0, -80.0)  # lower-left corner of the root
    extent: float = 160.0                         # side length of the root square
    max_depth: int = 8                            # unit = extent / 2**max_depth


@dataclass
class PathfinderConfig:
    """Search limits."""
    max_expansions: Optional[int] = None  # None = unbounded


@dataclass
class FloorPlanConfig:
    """Render-buffer shaping for the 3D floor plan and path markers."""
    max_vertices: int = 10000
    path_height: float = -1.2


@dataclass
class MonitoringConfig:
    """Where monitoring events go."""
    event_log: Optional[str] = None  # JSONL path; None disables the file log


@dataclass
class NavigationProfile:
    """Resolved configuration for one active profile."""
    name: str
    index: IndexConfig = field(default_factory=IndexConfig)
    pathfinder: PathfinderConfig = field(default_factory=PathfinderConfig)
    floor_plan: FloorPlanConfig = field(default_factory=FloorPlanConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

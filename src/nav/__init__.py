# src/nav/__init__.py
"""
Navigation over visited ground.

Provides:
- PathFinder / find_path: A* over occupied cells of an OccupancyQuadTree
- SearchNode: coordinate-keyed search node
- RegionNotMapped / NoPathFound: the two recoverable failure kinds
- NavigationSession: position stream + endpoint designation + path requests
"""

from __future__ import annotations

from .errors import NavigationError, NoPathFound, RegionNotMapped
from .pathfinder import PathFinder, SearchNode, find_path
from .session import NavigationSession

__all__ = [
    "NavigationError",
    "NoPathFound",
    "RegionNotMapped",
    "PathFinder",
    "SearchNode",
    "find_path",
    "NavigationSession",
]

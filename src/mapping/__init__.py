# src/mapping/__init__.py
"""
Occupancy mapping of visited ground.

Provides:
- OccupancyQuadTree: bounded quadtree of visited unit cells
- QuadNode: a square region node of that tree
- floor_plan_vertices / waypoints_to_markers: 3D buffers for renderers
- Point2 / Point3 and ground-plane projection helpers
"""

from __future__ import annotations

from .geometry import Point2, Point3, as_point2, ground_projection
from .quadtree import PLANE_SPACER, IndexListener, OccupancyQuadTree, QuadNode
from .floor_plan import floor_plan_vertices, waypoints_to_markers

__all__ = [
    "Point2",
    "Point3",
    "as_point2",
    "ground_projection",
    "PLANE_SPACER",
    "IndexListener",
    "OccupancyQuadTree",
    "QuadNode",
    "floor_plan_vertices",
    "waypoints_to_markers",
]

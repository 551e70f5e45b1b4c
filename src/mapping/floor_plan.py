# convert occupancy polygons and paths into 3D render buffers
# src/mapping/floor_plan.py
"""
Floor plan export for 3D renderers.

This module only shapes data:
- occupancy polygon → flat vertex buffer on the ground plane
- 2D waypoints → 3D marker positions at a fixed height

It does NOT own meshes, materials or scene graphs; that's the renderer's job.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from .geometry import Point2, Point3
from .quadtree import OccupancyQuadTree

log = logging.getLogger(__name__)

# Vertex buffer capacity of the floor plan mesh.
DEFAULT_MAX_VERTICES = 10000

# Height at which path markers float above the floor.
DEFAULT_PATH_HEIGHT = -1.2

_VERTICES_PER_CELL = 6


def floor_plan_vertices(
    index: OccupancyQuadTree,
    *,
    max_vertices: int = DEFAULT_MAX_VERTICES,
    floor_height: float = 0.0,
) -> List[float]:
    """
    Flatten the occupancy polygon into [x0, y0, z0, x1, y1, z1, ...].

    Ground-plane (x, y) maps to world (x, floor_height, y). If the polygon
    has more than `max_vertices` vertices, whole cells are dropped from the
    end so the buffer never holds a partial triangle pair.
    """
    polygon = index.occupied_boundary_as_polygon()

    limit = (max(max_vertices, 0) // _VERTICES_PER_CELL) * _VERTICES_PER_CELL
    if len(polygon) > limit:
        log.warning(
            "Floor plan truncated: %d vertices exceed capacity %d",
            len(polygon),
            max_vertices,
        )
        polygon = polygon[:limit]

    buffer: List[float] = []
    for (x, y) in polygon:
        buffer.extend((float(x), float(floor_height), float(y)))
    return buffer


def waypoints_to_markers(
    path: Iterable[Point2],
    *,
    height: float = DEFAULT_PATH_HEIGHT,
) -> List[Point3]:
    """
    Lift 2D waypoints into 3D marker positions (x, height, y).

    Order is preserved, so a goal → start path yields goal → start markers.
    """
    return [(float(x), float(height), float(y)) for (x, y) in path]


__all__ = [
    "DEFAULT_MAX_VERTICES",
    "DEFAULT_PATH_HEIGHT",
    "floor_plan_vertices",
    "waypoints_to_markers",
]
